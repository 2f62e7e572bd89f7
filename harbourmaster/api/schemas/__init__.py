"""API schemas package."""

from .requests import EmbedRequest, IngestRequest, ResubmitRequest, ReviewStatusUpdate
from .responses import (
    EmbedResponse,
    ErrorEntryResponse,
    ErrorListResponse,
    HealthResponse,
    IngestResponse,
    ReviewItemResponse,
    ReviewListResponse,
)

__all__ = [
    # Requests
    "IngestRequest",
    "EmbedRequest",
    "ReviewStatusUpdate",
    "ResubmitRequest",
    # Responses
    "IngestResponse",
    "EmbedResponse",
    "ReviewItemResponse",
    "ReviewListResponse",
    "ErrorEntryResponse",
    "ErrorListResponse",
    "HealthResponse",
]
