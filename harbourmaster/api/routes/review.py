"""
Review Routes

Human-review queue: list, inspect, move along the lifecycle, and resubmit a
corrected transcript.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from harbourmaster.api.deps import get_context
from harbourmaster.api.schemas import (
    IngestResponse,
    ResubmitRequest,
    ReviewItemResponse,
    ReviewListResponse,
    ReviewStatusUpdate,
)
from harbourmaster.errors import InvalidTransitionError, RecordNotFoundError
from harbourmaster.models import ReviewStatus, Transcript
from harbourmaster.pipeline.context import IngestContext
from harbourmaster.pipeline.orchestrator import run_ingestion

router = APIRouter()


def _get_item_or_404(ctx: IngestContext, item_id: str):
    try:
        return ctx.review_store.get_item(item_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/review", response_model=ReviewListResponse)
def list_review_items(
    status_filter: Optional[ReviewStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=500),
    ctx: IngestContext = Depends(get_context),
) -> ReviewListResponse:
    """List parked transcripts, newest first."""
    items = ctx.review_store.list_items(status=status_filter, limit=limit)
    return ReviewListResponse(
        items=[ReviewItemResponse.model_validate(item) for item in items],
        count=len(items),
    )


@router.get("/review/{item_id}", response_model=ReviewItemResponse)
def get_review_item(item_id: str, ctx: IngestContext = Depends(get_context)) -> ReviewItemResponse:
    return ReviewItemResponse.model_validate(_get_item_or_404(ctx, item_id))


@router.patch("/review/{item_id}", response_model=ReviewItemResponse)
def update_review_status(
    item_id: str,
    update: ReviewStatusUpdate,
    ctx: IngestContext = Depends(get_context),
) -> ReviewItemResponse:
    """Move an item along needs_review -> in_progress -> fixed | discarded."""
    try:
        item = ctx.review_store.transition(item_id, update.status)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return ReviewItemResponse.model_validate(item)


@router.post("/review/{item_id}/resubmit", response_model=IngestResponse)
def resubmit_review_item(
    item_id: str,
    request: ResubmitRequest,
    ctx: IngestContext = Depends(get_context),
) -> IngestResponse:
    """
    Re-run ingestion for an in-progress item.

    Uses the corrected transcript when given, the parked one otherwise. On
    success the item is marked fixed. On failure it stays in progress; a
    parked failure is recorded on this item rather than opening another.
    """
    item = _get_item_or_404(ctx, item_id)
    if item.status != ReviewStatus.IN_PROGRESS.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Review item must be in_progress to resubmit (is {item.status})",
        )

    outcome = run_ingestion(
        ctx,
        Transcript(
            text=request.transcript or item.transcript,
            harbour_name=request.harbour_name,
            row_id=request.row_id,
        ),
        review_id=item_id,
    )
    ctx.review_store.transition(item_id, ReviewStatus.FIXED)
    return IngestResponse.from_outcome(outcome)
