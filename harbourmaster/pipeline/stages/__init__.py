"""Ingestion pipeline stages."""

from .classifier import classify
from .cleaner import clean
from .embedding import embedding_text, trigger_embedding
from .guardrails import check_guardrails
from .resolver import resolve_reference
from .tier import extract_tier
from .transformer import SHAPE_COLUMNS, to_columns
from .validator import validate_record

__all__ = [
    "extract_tier",
    "classify",
    "clean",
    "validate_record",
    "check_guardrails",
    "resolve_reference",
    "to_columns",
    "SHAPE_COLUMNS",
    "trigger_embedding",
    "embedding_text",
]
