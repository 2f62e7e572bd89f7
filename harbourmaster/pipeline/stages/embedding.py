"""Stage 8: Embedding Trigger - post-insert vector enrichment.

Only Q&A and media rows carry an embedding. The vector is recomputed from
the stored row and overwrites the ``embedding`` column, so repeating the
trigger never creates rows. Failure is logged and never fails the ingestion.
"""

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from tenacity import RetryError, Retrying, stop_after_attempt, wait_exponential

from harbourmaster.config.settings import Settings
from harbourmaster.errors import EmbeddingError, RecordNotFoundError
from harbourmaster.llm.client import Embedder
from harbourmaster.models import Shape, require_every_shape
from harbourmaster.storage.gateway import EMBEDDING_SHAPES, PersistenceGateway

if TYPE_CHECKING:
    from harbourmaster.pipeline.router import ErrorRouter

logger = structlog.get_logger(__name__)


def _qna_text(row: dict[str, Any]) -> str:
    return f"{row['question']}\n{row['answer']}"


def _media_text(row: dict[str, Any]) -> str:
    parts = [row.get("title"), row.get("description"), " ".join(row.get("tags") or [])]
    return "\n".join(part for part in parts if part)


EMBEDDING_TEXT: Mapping[Shape, Optional[Callable[[dict[str, Any]], str]]] = MappingProxyType({
    Shape.QNA: _qna_text,
    Shape.HARBOUR: None,
    Shape.WEATHER_PROFILE: None,
    Shape.MEDIA: _media_text,
})
require_every_shape(EMBEDDING_TEXT, "EMBEDDING_TEXT")


def embedding_text(shape: Shape, row: dict[str, Any]) -> Optional[str]:
    """Text to embed for a stored row, or None for shapes without embeddings."""
    builder = EMBEDDING_TEXT[shape]
    return builder(row) if builder is not None else None


def _embed_with_retry(embedder: Embedder, text: str, settings: Settings) -> list[float]:
    retrying = Retrying(
        stop=stop_after_attempt(settings.embedding_max_attempts),
        wait=wait_exponential(
            multiplier=1,
            min=settings.embedding_retry_min_wait,
            max=settings.embedding_retry_max_wait,
        ),
        reraise=False,
    )
    return retrying(embedder.embed_query, text)


def _report_failure(
    shape: Shape,
    record_id: str,
    error: str,
    settings: Settings,
    router: Optional["ErrorRouter"],
    transcript: str,
    stage: str,
) -> None:
    logger.error(
        "embedding_failed",
        shape=shape.value,
        id=record_id,
        stage=stage,
        attempts=settings.embedding_max_attempts,
        error=error,
    )
    if router is not None:
        router.route(
            EmbeddingError(
                "Embedding generation failed" if stage == "embed" else "Embedding could not be stored",
                details={
                    "table": shape.value,
                    "id": record_id,
                    "stage": stage,
                    "attempts": settings.embedding_max_attempts,
                    "error": error,
                },
            ),
            transcript,
        )


def trigger_embedding(
    shape: Shape,
    record_id: str,
    gateway: PersistenceGateway,
    embedder: Embedder,
    settings: Settings,
    router: Optional["ErrorRouter"] = None,
    transcript: str = "",
) -> bool:
    """Compute and store the embedding for one persisted row.

    Args:
        shape: Shape of the stored row.
        record_id: Id of the stored row.
        gateway: Record access.
        embedder: Embedding collaborator.
        settings: Supplies retry attempts and back-off.
        router: When given, a final failure is also written to the error log.
        transcript: Transcript recorded with a failure entry.

    Returns:
        True when the vector was stored, False when skipped or failed.

    Raises:
        RecordNotFoundError: No row with that id.
    """
    if shape not in EMBEDDING_SHAPES:
        logger.debug("embedding_skipped", shape=shape.value)
        return False

    row = gateway.get_record(shape, record_id)
    if row is None:
        raise RecordNotFoundError(f"{shape.value} record not found: {record_id}")

    text = embedding_text(shape, row)
    try:
        vector = _embed_with_retry(embedder, text, settings)
    except RetryError as e:
        cause = e.last_attempt.exception()
        _report_failure(shape, record_id, str(cause), settings, router, transcript, stage="embed")
        return False

    try:
        gateway.set_embedding(shape, record_id, vector)
    except SQLAlchemyError as e:
        _report_failure(shape, record_id, str(e), settings, router, transcript, stage="store")
        return False

    logger.info("embedding_stored", shape=shape.value, id=record_id, dimensions=len(vector))
    return True
