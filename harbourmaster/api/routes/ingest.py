"""
Ingest Routes

POST /ingest runs one transcript through the pipeline. Failures propagate as
IngestError and are rendered by the application's exception handler after
they have been logged and parked.
"""

from fastapi import APIRouter, Depends

from harbourmaster.api.deps import get_context
from harbourmaster.api.schemas import IngestRequest, IngestResponse
from harbourmaster.models import Transcript
from harbourmaster.pipeline.context import IngestContext
from harbourmaster.pipeline.orchestrator import run_ingestion

router = APIRouter()


# Sync handler: FastAPI runs it in the threadpool, the pipeline blocks on the LLM
@router.post("/ingest", response_model=IngestResponse)
def ingest(request: IngestRequest, ctx: IngestContext = Depends(get_context)) -> IngestResponse:
    """Classify, clean, validate and persist one transcript."""
    outcome = run_ingestion(
        ctx,
        Transcript(
            text=request.transcript or "",
            harbour_name=request.harbour_name,
            row_id=request.row_id,
        ),
    )
    return IngestResponse.from_outcome(outcome)
