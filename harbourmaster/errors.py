"""Failure taxonomy for the ingestion pipeline.

Each subclass fixes the category, HTTP status and error-log severity of one
kind of failure. Whether a category is parked for human review is decided
centrally by the Error & Review Router.
"""

from typing import Any, ClassVar, Optional

from harbourmaster.models.enums import ErrorSeverity, FailureCategory


class IngestError(Exception):
    """Base error for a failed ingestion request."""

    category: ClassVar[FailureCategory] = FailureCategory.INTERNAL_ERROR
    status_code: ClassVar[int] = 500
    severity: ClassVar[Optional[ErrorSeverity]] = ErrorSeverity.CRITICAL
    title: ClassVar[str] = "Unhandled Error"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        payload: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.payload = payload
        self.review_id: Optional[str] = None

    def to_response(self) -> dict[str, Any]:
        """JSON body returned to the caller."""
        body: dict[str, Any] = {
            "status": "error",
            "error": self.category.value,
            "message": self.message,
            "details": self.details,
        }
        if self.review_id is not None:
            body["review_id"] = self.review_id
        return body


class MissingInputError(IngestError):
    category = FailureCategory.MISSING_INPUT
    status_code = 400
    severity = None
    title = "Missing Transcript"


class ClassifierParseError(IngestError):
    category = FailureCategory.CLASSIFIER_PARSE_FAILURE
    status_code = 500
    severity = ErrorSeverity.CRITICAL
    title = "Classifier Parse Failed"


class LowConfidenceError(IngestError):
    category = FailureCategory.LOW_CONFIDENCE
    status_code = 422
    severity = ErrorSeverity.MEDIUM
    title = "Low Classification Confidence"

    def to_response(self) -> dict[str, Any]:
        body = super().to_response()
        body["suggested_shape"] = self.details.get("suggested_shape")
        body["confidence"] = self.details.get("confidence")
        body["reasoning"] = self.details.get("reasoning")
        return body


class CleanerParseError(IngestError):
    category = FailureCategory.CLEANER_PARSE_FAILURE
    status_code = 422
    severity = ErrorSeverity.HIGH
    title = "JSON Parse Failed"


class SchemaValidationError(IngestError):
    category = FailureCategory.SCHEMA_VALIDATION
    status_code = 422
    severity = ErrorSeverity.HIGH
    title = "Schema Validation Failed"


class GuardrailViolationError(IngestError):
    category = FailureCategory.GUARDRAIL_VIOLATION
    status_code = 422
    severity = ErrorSeverity.MEDIUM
    title = "Tier Format Violation"

    def to_response(self) -> dict[str, Any]:
        body = super().to_response()
        body["cleaned"] = self.payload
        return body


class MissingReferenceError(IngestError):
    category = FailureCategory.MISSING_REFERENCE
    status_code = 422
    severity = ErrorSeverity.HIGH
    title = "Harbour Not Found"


class PersistenceError(IngestError):
    category = FailureCategory.PERSISTENCE_FAILURE
    status_code = 500
    severity = ErrorSeverity.CRITICAL
    title = "Database Insert Failed"


class EmbeddingError(IngestError):
    """Post-insert enrichment failed. Never surfaced as a failed request."""

    category = FailureCategory.EMBEDDING_FAILURE
    status_code = 502
    severity = ErrorSeverity.MEDIUM
    title = "Embedding Generation Failed"


class CollaboratorError(IngestError):
    category = FailureCategory.COLLABORATOR_FAILURE
    status_code = 502
    severity = ErrorSeverity.CRITICAL
    title = "LLM Unavailable"


class InternalPipelineError(IngestError):
    """Unexpected exception inside a stage."""

    category = FailureCategory.INTERNAL_ERROR
    status_code = 500
    severity = ErrorSeverity.CRITICAL
    title = "Internal Pipeline Error"


# =============================================================================
# Non-ingestion errors (review queue / record lookups)
# =============================================================================

class RecordNotFoundError(LookupError):
    """A stored record, review item or error entry does not exist."""

    pass


class InvalidTransitionError(ValueError):
    """A review-queue status change outside the allowed lifecycle."""

    pass
