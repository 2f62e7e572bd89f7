"""
Error log and review queue persistence.

The error log is append-only apart from the ``resolved`` flag. Review queue
items only ever change status, along the lifecycle
needs_review -> in_progress -> fixed | discarded.
"""

from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from harbourmaster.errors import InvalidTransitionError, RecordNotFoundError
from harbourmaster.models.enums import ErrorSeverity, FailureCategory, ReviewStatus
from harbourmaster.storage.tables import ReviewQueueItem, ValidationErrorEntry

logger = structlog.get_logger(__name__)

ALLOWED_TRANSITIONS: dict[ReviewStatus, frozenset[ReviewStatus]] = {
    ReviewStatus.NEEDS_REVIEW: frozenset({ReviewStatus.IN_PROGRESS}),
    ReviewStatus.IN_PROGRESS: frozenset({ReviewStatus.FIXED, ReviewStatus.DISCARDED}),
    ReviewStatus.FIXED: frozenset(),
    ReviewStatus.DISCARDED: frozenset(),
}


class ReviewStore:
    """Writes and queries the error log and the review queue."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def record_failure(
        self,
        *,
        level: Optional[ErrorSeverity],
        title: str,
        category: FailureCategory,
        details: dict[str, Any],
        transcript: str,
        attempted_payload: Optional[dict[str, Any]],
        park: bool,
        error_message: str,
        validation_errors: Any = None,
        review_id: Optional[str] = None,
    ) -> tuple[Optional[str], Optional[str]]:
        """Append an error-log entry and, when ``park`` is set, a review item.

        Both rows are written in one transaction. When ``review_id`` names an
        existing item, a parked failure updates that item (transcript, error,
        violations) and leaves its status alone instead of adding a new one.

        Returns:
            Tuple of (error_log_id, review_id); either may be None when not written.
        """
        with self._session_factory() as session, session.begin():
            entry = None
            item = None
            if level is not None:
                entry = ValidationErrorEntry(
                    level=level.value,
                    title=title,
                    error_type=category.value,
                    details=details,
                    transcript=transcript,
                    attempted_payload=attempted_payload,
                    resolved=False,
                )
                session.add(entry)
            if park and review_id is not None:
                item = session.get(ReviewQueueItem, review_id)
                if item is not None:
                    item.transcript = transcript
                    item.error_message = error_message
                    item.error_type = category.value
                    item.validation_errors = validation_errors
            if park and item is None:
                item = ReviewQueueItem(
                    transcript=transcript,
                    error_message=error_message,
                    error_type=category.value,
                    validation_errors=validation_errors,
                    status=ReviewStatus.NEEDS_REVIEW.value,
                )
                session.add(item)
            session.flush()
            return (entry.id if entry else None, item.id if item else None)

    # =========================================================================
    # Review queue
    # =========================================================================

    def list_items(self, status: Optional[ReviewStatus] = None, limit: int = 100) -> list[ReviewQueueItem]:
        query = select(ReviewQueueItem).order_by(ReviewQueueItem.created_at.desc()).limit(limit)
        if status is not None:
            query = query.where(ReviewQueueItem.status == status.value)
        with self._session_factory() as session:
            return list(session.execute(query).scalars())

    def get_item(self, item_id: str) -> ReviewQueueItem:
        with self._session_factory() as session:
            item = session.get(ReviewQueueItem, item_id)
        if item is None:
            raise RecordNotFoundError(f"Review item not found: {item_id}")
        return item

    def transition(self, item_id: str, new_status: ReviewStatus) -> ReviewQueueItem:
        """Move a review item to a new status.

        Raises:
            RecordNotFoundError: Unknown item.
            InvalidTransitionError: The lifecycle does not allow the change.
        """
        with self._session_factory() as session, session.begin():
            item = session.get(ReviewQueueItem, item_id)
            if item is None:
                raise RecordNotFoundError(f"Review item not found: {item_id}")

            current = ReviewStatus(item.status)
            if new_status not in ALLOWED_TRANSITIONS[current]:
                raise InvalidTransitionError(
                    f"Cannot move review item from {current.value} to {new_status.value}"
                )
            item.status = new_status.value

        logger.info("review_item_transition", id=item_id, from_status=current.value, to_status=new_status.value)
        return item

    # =========================================================================
    # Error log
    # =========================================================================

    def list_errors(
        self,
        level: Optional[ErrorSeverity] = None,
        resolved: Optional[bool] = None,
        limit: int = 100,
    ) -> list[ValidationErrorEntry]:
        query = select(ValidationErrorEntry).order_by(ValidationErrorEntry.created_at.desc()).limit(limit)
        if level is not None:
            query = query.where(ValidationErrorEntry.level == level.value)
        if resolved is not None:
            query = query.where(ValidationErrorEntry.resolved == resolved)
        with self._session_factory() as session:
            return list(session.execute(query).scalars())

    def resolve_error(self, entry_id: str) -> ValidationErrorEntry:
        with self._session_factory() as session, session.begin():
            entry = session.get(ValidationErrorEntry, entry_id)
            if entry is None:
                raise RecordNotFoundError(f"Error log entry not found: {entry_id}")
            entry.resolved = True
        return entry
