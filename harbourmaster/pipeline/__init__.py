"""Transcript ingestion pipeline."""

from .context import IngestContext, build_context
from .orchestrator import ingest_text, run_ingestion
from .router import PARKED_CATEGORIES, ErrorRouter

__all__ = [
    "IngestContext",
    "build_context",
    "run_ingestion",
    "ingest_text",
    "ErrorRouter",
    "PARKED_CATEGORIES",
]
