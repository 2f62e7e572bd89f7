"""
Error Log Routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from harbourmaster.api.deps import get_context
from harbourmaster.api.schemas import ErrorEntryResponse, ErrorListResponse
from harbourmaster.errors import RecordNotFoundError
from harbourmaster.models import ErrorSeverity
from harbourmaster.pipeline.context import IngestContext

router = APIRouter()


@router.get("/errors", response_model=ErrorListResponse)
def list_errors(
    level: Optional[ErrorSeverity] = Query(default=None),
    resolved: Optional[bool] = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    ctx: IngestContext = Depends(get_context),
) -> ErrorListResponse:
    """List error-log entries, newest first."""
    entries = ctx.review_store.list_errors(level=level, resolved=resolved, limit=limit)
    return ErrorListResponse(
        errors=[ErrorEntryResponse.model_validate(entry) for entry in entries],
        count=len(entries),
    )


@router.post("/errors/{entry_id}/resolve", response_model=ErrorEntryResponse)
def resolve_error(entry_id: str, ctx: IngestContext = Depends(get_context)) -> ErrorEntryResponse:
    try:
        entry = ctx.review_store.resolve_error(entry_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ErrorEntryResponse.model_validate(entry)
