"""Enumeration types for the ingestion models."""

from enum import Enum


class Shape(str, Enum):
    """Record kinds the pipeline can classify, clean, validate and persist.

    The value doubles as the storage table name.
    """

    QNA = "harbour_questions"
    HARBOUR = "harbours"
    WEATHER_PROFILE = "harbour_weather_profiles"
    MEDIA = "harbour_media"


class Tier(str, Enum):
    """Access level attached to content records."""

    FREE = "free"
    PRO = "pro"
    EXCLUSIVE = "exclusive"


class ClassificationMethod(str, Enum):
    """How a shape was decided."""

    PREFIX = "prefix"
    KEYWORD = "keyword"
    FALLBACK = "fallback"


class ErrorSeverity(str, Enum):
    """Severity levels for the error log."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


class FailureCategory(str, Enum):
    """Stable failure category names returned to callers and stored in the error log."""

    MISSING_INPUT = "missing_input"
    CLASSIFIER_PARSE_FAILURE = "classifier_parse_failure"
    LOW_CONFIDENCE = "low_confidence"
    CLEANER_PARSE_FAILURE = "cleaner_parse_failure"
    SCHEMA_VALIDATION = "schema_validation"
    GUARDRAIL_VIOLATION = "guardrail_violation"
    MISSING_REFERENCE = "missing_reference"
    PERSISTENCE_FAILURE = "persistence_failure"
    EMBEDDING_FAILURE = "embedding_failure"
    COLLABORATOR_FAILURE = "collaborator_failure"
    INTERNAL_ERROR = "internal_error"


class ReviewStatus(str, Enum):
    """Lifecycle of a parked transcript."""

    NEEDS_REVIEW = "needs_review"
    IN_PROGRESS = "in_progress"
    FIXED = "fixed"
    DISCARDED = "discarded"


class QnACategory(str, Enum):
    """Categories for Q&A entries."""

    APPROACH_ENTRY = "Approach & Entry"
    MOORING = "Mooring"
    ANCHORING = "Anchoring"
    WEATHER_SHELTER = "Weather & Shelter"
    SAFETY_HAZARDS = "Safety & Hazards"
    FACILITIES_SERVICES = "Facilities & Services"
    LOCAL_KNOWLEDGE = "Local Knowledge"
    MEDIA_TUTORIALS = "Media Tutorials"
    GENERAL = "General"


class HarbourType(str, Enum):
    HARBOUR = "harbour"
    ANCHORAGE = "anchorage"
    BAY = "bay"
    MARINA = "marina"


class Facility(str, Enum):
    WATER = "water"
    FUEL = "fuel"
    ELECTRICITY = "electricity"
    WIFI = "wifi"
    SHOWERS = "showers"
    RESTAURANT = "restaurant"
    PROVISIONS = "provisions"
    CHANDLERY = "chandlery"
    LAUNDRY = "laundry"
    REPAIR = "repair"


class WindDirection(str, Enum):
    N = "n"
    NE = "ne"
    E = "e"
    SE = "se"
    S = "s"
    SW = "sw"
    W = "w"
    NW = "nw"


class ShelterQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"


class MediaType(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"
    AERIAL = "aerial"
    TUTORIAL = "tutorial"
    DIAGRAM = "diagram"


def require_every_shape(table, name: str) -> None:
    """Fail at import time when a per-shape dispatch table misses a shape."""
    missing = [shape.value for shape in Shape if shape not in table]
    if missing:
        raise RuntimeError(f"{name} has no entry for: {', '.join(missing)}")
