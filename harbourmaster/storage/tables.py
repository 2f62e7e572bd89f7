"""
Storage tables: one per shape, plus the error log and the review queue.
"""

import uuid
from datetime import datetime
from types import MappingProxyType

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text

from harbourmaster.models.enums import ReviewStatus, Shape, require_every_shape
from harbourmaster.storage.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Harbour(Base):
    __tablename__ = Shape.HARBOUR.value

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False, index=True)
    region = Column(String(200), nullable=True)
    harbour_type = Column(String(20), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    facilities = Column(JSON, nullable=False, default=list)
    capacity = Column(Integer, nullable=True)
    depth_range = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<Harbour(id={self.id}, name={self.name!r})>"


class HarbourQuestion(Base):
    __tablename__ = Shape.QNA.value

    id = Column(String(36), primary_key=True, default=_new_id)
    harbour_id = Column(String(36), ForeignKey("harbours.id"), nullable=False, index=True)
    harbour_name = Column(String(200), nullable=False)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    tier = Column(String(20), nullable=False)
    notes = Column(Text, nullable=True)
    source_row_id = Column(String(200), nullable=True)
    embedding = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class HarbourWeatherProfile(Base):
    __tablename__ = Shape.WEATHER_PROFILE.value

    id = Column(String(36), primary_key=True, default=_new_id)
    harbour_id = Column(String(36), ForeignKey("harbours.id"), nullable=False, index=True)
    harbour_name = Column(String(200), nullable=False)
    sheltered_from = Column(JSON, nullable=False, default=list)
    exposed_to = Column(JSON, nullable=False, default=list)
    shelter_quality = Column(String(20), nullable=False)
    swell_susceptible = Column(Boolean, nullable=False, default=False)
    swell_conditions = Column(Text, nullable=True)
    best_conditions = Column(Text, nullable=True)
    warnings = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class HarbourMedia(Base):
    __tablename__ = Shape.MEDIA.value

    id = Column(String(36), primary_key=True, default=_new_id)
    harbour_id = Column(String(36), ForeignKey("harbours.id"), nullable=False, index=True)
    harbour_name = Column(String(200), nullable=False)
    media_type = Column(String(20), nullable=False)
    title = Column(String(200), nullable=False)
    file_url = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    tier = Column(String(20), nullable=False)
    duration = Column(String(10), nullable=True)
    notes = Column(Text, nullable=True)
    source_row_id = Column(String(200), nullable=True)
    embedding = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


# =============================================================================
# Error log and review queue
# =============================================================================

class ValidationErrorEntry(Base):
    """Append-only error log. Only ``resolved`` is ever updated."""

    __tablename__ = "validation_errors"

    id = Column(String(36), primary_key=True, default=_new_id)
    level = Column(String(20), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    error_type = Column(String(50), nullable=False, index=True)
    details = Column(JSON, nullable=True)
    transcript = Column(Text, nullable=False, default="")
    attempted_payload = Column(JSON, nullable=True)
    resolved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class ReviewQueueItem(Base):
    """Parked transcript awaiting human correction."""

    __tablename__ = "review_queue"

    id = Column(String(36), primary_key=True, default=_new_id)
    transcript = Column(Text, nullable=False)
    error_message = Column(Text, nullable=False)
    error_type = Column(String(50), nullable=False, index=True)
    validation_errors = Column(JSON, nullable=True)
    status = Column(String(20), nullable=False, default=ReviewStatus.NEEDS_REVIEW.value, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


TABLES_BY_SHAPE = MappingProxyType({
    Shape.QNA: HarbourQuestion,
    Shape.HARBOUR: Harbour,
    Shape.WEATHER_PROFILE: HarbourWeatherProfile,
    Shape.MEDIA: HarbourMedia,
})

require_every_shape(TABLES_BY_SHAPE, "TABLES_BY_SHAPE")
