"""API routes package."""

from . import embed
from . import errors
from . import ingest
from . import review

__all__ = ["ingest", "embed", "review", "errors"]
