"""
Error & Review Router

Turns a failed ingestion into durable records:
- every category with a severity gets an error-log entry
- low_confidence, schema_validation and missing_reference are also parked
  in the review queue

Both writes happen before the caller builds its response.
"""

from typing import Any, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from harbourmaster.errors import IngestError
from harbourmaster.models import ErrorSeverity, FailureCategory
from harbourmaster.storage.review_store import ReviewStore

logger = structlog.get_logger(__name__)

PARKED_CATEGORIES = frozenset({
    FailureCategory.LOW_CONFIDENCE,
    FailureCategory.SCHEMA_VALIDATION,
    FailureCategory.MISSING_REFERENCE,
})


def _validation_errors(error: IngestError) -> Any:
    if "violations" in error.details:
        return error.details["violations"]
    return error.details


def _attempted_payload(error: IngestError, transcript: str) -> Optional[dict[str, Any]]:
    if error.payload is not None:
        return error.payload
    if error.severity is ErrorSeverity.CRITICAL:
        return {"transcript": transcript}
    return None


class ErrorRouter:
    """Records failures in the error log and parks reviewable ones."""

    def __init__(self, review_store: ReviewStore):
        self.review_store = review_store

    def should_park(self, error: IngestError) -> bool:
        return error.category in PARKED_CATEGORIES

    def route(self, error: IngestError, transcript: str, review_id: Optional[str] = None) -> Optional[str]:
        """Log and (where applicable) park a failure.

        Sets ``error.review_id`` when the failure was parked. A storage fault
        while recording is logged and swallowed so the caller still reports
        the original failure.

        Args:
            error: The failure to record.
            transcript: Transcript as received.
            review_id: Existing review item the transcript was resubmitted
                from. A parked failure is recorded on that item instead of
                opening a new one.

        Returns:
            The review queue id, or None when the failure was not parked.
        """
        park = self.should_park(error)
        if error.severity is None and not park:
            logger.debug("error_not_logged", category=error.category.value)
            return None

        try:
            log_id, parked_id = self.review_store.record_failure(
                level=error.severity,
                title=error.title,
                category=error.category,
                details=error.details,
                transcript=transcript,
                attempted_payload=_attempted_payload(error, transcript),
                park=park,
                error_message=error.message,
                validation_errors=_validation_errors(error) if park else None,
                review_id=review_id,
            )
        except SQLAlchemyError as e:
            logger.exception(
                "error_routing_failed",
                category=error.category.value,
                sink_error=str(e),
            )
            return None
        error.review_id = parked_id

        logger.info(
            "error_routed",
            category=error.category.value,
            severity=error.severity.value if error.severity else None,
            error_log_id=log_id,
            review_id=parked_id,
        )
        return parked_id
