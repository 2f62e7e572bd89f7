"""Pydantic data models for the ingestion pipeline."""

from .enums import (
    ClassificationMethod,
    ErrorSeverity,
    Facility,
    FailureCategory,
    HarbourType,
    MediaType,
    QnACategory,
    ReviewStatus,
    Shape,
    ShelterQuality,
    Tier,
    WindDirection,
    require_every_shape,
)
from .ingest import ClassificationResult, IngestOutcome, TierDirective, Transcript, Violation
from .records import (
    CanonicalRecord,
    Coordinates,
    HarbourRecord,
    MediaRecord,
    QnARecord,
    ShapeRecord,
    SwellSurge,
    WeatherProfileRecord,
    WindDirections,
)

__all__ = [
    # Enums
    "Shape",
    "Tier",
    "ClassificationMethod",
    "ErrorSeverity",
    "FailureCategory",
    "ReviewStatus",
    "QnACategory",
    "HarbourType",
    "Facility",
    "WindDirection",
    "ShelterQuality",
    "MediaType",
    "require_every_shape",
    # Stage contracts
    "Transcript",
    "TierDirective",
    "ClassificationResult",
    "Violation",
    "IngestOutcome",
    # Canonical records
    "CanonicalRecord",
    "QnARecord",
    "Coordinates",
    "HarbourRecord",
    "WindDirections",
    "SwellSurge",
    "WeatherProfileRecord",
    "MediaRecord",
    "ShapeRecord",
]
