"""Canonical record models, one per shape.

These are the contracts between the Cleaner and the Column Transformer.
Every model forbids unknown properties and restricts enumerations to their
exact canonical values, so a validated record can be mapped to storage
columns without any field-name guessing.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

from .enums import (
    Facility,
    HarbourType,
    MediaType,
    QnACategory,
    ShelterQuality,
    Tier,
    WindDirection,
)

NonEmptyStr = Annotated[str, Field(strict=True, min_length=1)]
Latitude = Annotated[float, Field(strict=True, ge=-90.0, le=90.0)]
Longitude = Annotated[float, Field(strict=True, ge=-180.0, le=180.0)]
DomainTag = Annotated[str, Field(strict=True, pattern=r"^[a-z][a-z_]*:[a-z0-9][a-z0-9_.\-]*$")]

MediaCategory = Literal[
    "Approach & Entry",
    "Mooring",
    "Anchoring",
    "Weather & Shelter",
    "Safety & Hazards",
    "Facilities & Services",
    "Local Knowledge",
    "General",
]


class CanonicalRecord(BaseModel):
    """Base for all shape records: closed property set."""

    model_config = ConfigDict(extra="forbid", frozen=True)


# =============================================================================
# Q&A
# =============================================================================

class QnARecord(CanonicalRecord):
    """A question/answer entry about a specific harbour."""

    harbour: NonEmptyStr = Field(..., description="Harbour the entry is about")
    question: NonEmptyStr
    answer: NonEmptyStr
    category: QnACategory
    tags: list[DomainTag] = Field(default_factory=list, description="Domain-prefixed tags")
    tier: Tier
    notes: Optional[StrictStr] = None


# =============================================================================
# Harbour master record
# =============================================================================

class Coordinates(CanonicalRecord):
    lat: Latitude
    lng: Longitude


class HarbourRecord(CanonicalRecord):
    """Master record that defines a harbour in the registry."""

    name: NonEmptyStr
    region: NonEmptyStr
    harbour_type: HarbourType
    coordinates: Coordinates
    description: Optional[Annotated[str, Field(strict=True, max_length=1000)]] = None
    facilities: list[Facility] = Field(default_factory=list)
    capacity: Optional[Annotated[int, Field(strict=True, ge=0)]] = None
    depth_range: Optional[
        Annotated[str, Field(strict=True, pattern=r"^\d+(\.\d+)?-\d+(\.\d+)?m$")]
    ] = None
    notes: Optional[StrictStr] = None


# =============================================================================
# Weather profile
# =============================================================================

class WindDirections(CanonicalRecord):
    sheltered_from: list[WindDirection] = Field(default_factory=list)
    exposed_to: list[WindDirection] = Field(default_factory=list)


class SwellSurge(CanonicalRecord):
    susceptible: StrictBool
    conditions: Optional[StrictStr] = None


class WeatherProfileRecord(CanonicalRecord):
    """Shelter and exposure profile of a harbour."""

    harbour_name: NonEmptyStr
    wind_directions: WindDirections
    shelter_quality: ShelterQuality
    swell_surge: Optional[SwellSurge] = None
    best_conditions: Optional[StrictStr] = None
    warnings: Optional[StrictStr] = None
    notes: Optional[StrictStr] = None


# =============================================================================
# Media
# =============================================================================

class MediaRecord(CanonicalRecord):
    """Photo, video or diagram attached to a harbour."""

    harbour_name: NonEmptyStr
    media_type: MediaType
    title: Annotated[str, Field(strict=True, min_length=3, max_length=200)]
    url: Annotated[str, Field(strict=True, pattern=r"^https?://\S+$")]
    description: Optional[Annotated[str, Field(strict=True, max_length=1000)]] = None
    category: Optional[MediaCategory] = None
    tags: list[DomainTag] = Field(default_factory=list)
    tier: Tier
    duration: Optional[Annotated[str, Field(strict=True, pattern=r"^\d{1,3}:[0-5]\d$")]] = None
    notes: Optional[StrictStr] = None


ShapeRecord = Union[QnARecord, HarbourRecord, WeatherProfileRecord, MediaRecord]
