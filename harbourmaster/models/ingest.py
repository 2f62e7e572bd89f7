"""Models passed between ingestion stages."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import ClassificationMethod, Shape, Tier


class Transcript(BaseModel):
    """Raw transcript as received. Immutable once received."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Transcribed speech")
    harbour_name: Optional[str] = Field(None, description="Optional harbour-name hint")
    row_id: Optional[str] = Field(None, description="External tracking id (Coda/Zapier row)")


class TierDirective(BaseModel):
    """Result of stripping a leading TIER directive."""

    model_config = ConfigDict(frozen=True)

    tier: Tier
    explicit: bool = Field(..., description="True when the transcript carried a directive")
    text: str = Field(..., description="Working text with the directive removed")


class ClassificationResult(BaseModel):
    """Which shape a transcript belongs to, and how sure we are."""

    model_config = ConfigDict(frozen=True)

    shape: Shape
    confidence: float = Field(..., ge=0.0, le=1.0)
    method: ClassificationMethod
    reasoning: Optional[str] = None


class Violation(BaseModel):
    """A single structural violation found by schema validation."""

    path: str = Field(..., description="JSON-pointer style location, '/' for the root")
    reason: str
    type: str = Field(..., description="Machine-readable violation type")


class IngestOutcome(BaseModel):
    """Successful ingestion of one transcript."""

    shape: Shape
    record_id: str
    classification: ClassificationResult
    tier: Tier
    reference_id: Optional[str] = None
    embedding_triggered: bool = False
    cleaned: dict[str, Any]
    columns: dict[str, Any]
