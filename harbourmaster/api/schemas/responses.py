"""
Response schemas for the API.

Failures are not modelled here: every failed ingestion is rendered from
``IngestError.to_response()`` by the application's exception handler.
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from harbourmaster.models import ClassificationMethod, IngestOutcome, Shape


# =============================================================================
# Ingestion
# =============================================================================

class IngestResponse(BaseModel):
    """Successful ingestion."""
    status: Literal["ok"] = "ok"
    shape: Shape
    id: str = Field(..., description="Id of the inserted row")
    confidence: float
    method: ClassificationMethod
    reference_id: Optional[str] = Field(None, description="Resolved harbour id")
    embedding_triggered: bool
    cleaned: dict[str, Any]

    @classmethod
    def from_outcome(cls, outcome: IngestOutcome) -> "IngestResponse":
        return cls(
            shape=outcome.shape,
            id=outcome.record_id,
            confidence=outcome.classification.confidence,
            method=outcome.classification.method,
            reference_id=outcome.reference_id,
            embedding_triggered=outcome.embedding_triggered,
            cleaned=outcome.cleaned,
        )


class EmbedResponse(BaseModel):
    status: Literal["ok"] = "ok"
    shape: Shape
    id: str
    embedded: bool


# =============================================================================
# Review queue and error log
# =============================================================================

class ReviewItemResponse(BaseModel):
    """A parked transcript."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    transcript: str
    error_message: str
    error_type: str
    validation_errors: Optional[Any] = None
    status: str
    created_at: datetime
    updated_at: datetime


class ReviewListResponse(BaseModel):
    items: list[ReviewItemResponse]
    count: int


class ErrorEntryResponse(BaseModel):
    """An error-log entry."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    level: str
    title: str
    error_type: str
    details: Optional[Any] = None
    transcript: str
    attempted_payload: Optional[Any] = None
    resolved: bool
    created_at: datetime


class ErrorListResponse(BaseModel):
    errors: list[ErrorEntryResponse]
    count: int


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
