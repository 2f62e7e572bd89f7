"""
Embed Routes

Internal endpoint to (re)compute the embedding of an existing row.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from harbourmaster.api.deps import get_context, require_api_key
from harbourmaster.api.schemas import EmbedRequest, EmbedResponse
from harbourmaster.errors import RecordNotFoundError
from harbourmaster.pipeline.context import IngestContext
from harbourmaster.pipeline.stages import trigger_embedding
from harbourmaster.storage.gateway import EMBEDDING_SHAPES

router = APIRouter()


@router.post("/embed", response_model=EmbedResponse, dependencies=[Depends(require_api_key)])
def embed(request: EmbedRequest, ctx: IngestContext = Depends(get_context)) -> EmbedResponse:
    """Embed one stored row, overwriting any existing vector."""
    if request.shape not in EMBEDDING_SHAPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{request.shape.value} rows are not embedded",
        )

    try:
        embedded = trigger_embedding(
            request.shape,
            request.id,
            ctx.gateway,
            ctx.embedder,
            ctx.settings,
            router=ctx.router,
        )
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    if not embedded:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Embedding generation failed",
        )

    return EmbedResponse(shape=request.shape, id=request.id, embedded=True)
