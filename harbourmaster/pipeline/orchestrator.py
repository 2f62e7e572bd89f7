"""Ingestion Orchestrator - runs one transcript through every stage.

Single pass, no queueing:
    tier -> classify -> clean -> validate -> guardrails -> resolve
    -> transform -> insert -> embed

Any stage may stop the run. The failure is routed (error log, review queue)
before it propagates to the caller, so the response can carry the review id.
"""

from typing import Any, Optional

import structlog

from harbourmaster.errors import IngestError, InternalPipelineError, MissingInputError
from harbourmaster.models import (
    ClassificationResult,
    IngestOutcome,
    Shape,
    ShapeRecord,
    TierDirective,
    Transcript,
)
from harbourmaster.pipeline.context import IngestContext
from harbourmaster.pipeline.stages import (
    check_guardrails,
    classify,
    clean,
    extract_tier,
    resolve_reference,
    to_columns,
    trigger_embedding,
    validate_record,
)

logger = structlog.get_logger(__name__)


def run_ingestion(
    ctx: IngestContext,
    transcript: Transcript,
    review_id: Optional[str] = None,
) -> IngestOutcome:
    """Ingest one transcript.

    Args:
        ctx: Collaborators and settings.
        transcript: Raw transcript with optional harbour hint and row id.
        review_id: Review item being resubmitted; a parked failure is
            recorded on it rather than on a new item.

    Returns:
        IngestOutcome for the persisted record.

    Raises:
        IngestError: Any failure, already logged and parked as its category
            requires.
    """
    logger.info(
        "ingest_start",
        length=len(transcript.text or ""),
        harbour_hint=transcript.harbour_name,
        row_id=transcript.row_id,
    )

    try:
        return _run_stages(ctx, transcript)
    except IngestError as e:
        ctx.router.route(e, transcript.text or "", review_id=review_id)
        logger.warning(
            "ingest_failed",
            category=e.category.value,
            status_code=e.status_code,
            review_id=e.review_id,
        )
        raise
    except Exception as e:
        logger.exception("ingest_crashed", error=str(e))
        error = InternalPipelineError(
            f"Internal error: {e}",
            details={"error": str(e), "type": type(e).__name__},
        )
        ctx.router.route(error, transcript.text or "", review_id=review_id)
        raise error from e


def _run_stages(ctx: IngestContext, transcript: Transcript) -> IngestOutcome:
    if not transcript.text or not transcript.text.strip():
        raise MissingInputError("Missing transcript")

    directive = _run_tier_extraction(ctx, transcript)
    classification = _run_classification(ctx, directive)
    shape = classification.shape

    cleaned = _run_cleaning(ctx, shape, directive)
    record = _run_validation(shape, cleaned)
    check_guardrails(shape, record)

    reference_id = resolve_reference(shape, record, transcript.harbour_name, ctx.gateway)
    columns = to_columns(shape, record, reference_id, transcript.row_id)
    record_id = ctx.gateway.insert(shape, columns)

    embedded = trigger_embedding(
        shape,
        record_id,
        ctx.gateway,
        ctx.embedder,
        ctx.settings,
        router=ctx.router,
        transcript=transcript.text,
    )

    logger.info(
        "ingest_complete",
        shape=shape.value,
        id=record_id,
        method=classification.method.value,
        reference_id=reference_id,
        embedding_triggered=embedded,
    )

    return IngestOutcome(
        shape=shape,
        record_id=record_id,
        classification=classification,
        tier=directive.tier,
        reference_id=reference_id,
        embedding_triggered=embedded,
        cleaned=record.model_dump(mode="json"),
        columns=columns,
    )


# =============================================================================
# Stages
# =============================================================================

def _run_tier_extraction(ctx: IngestContext, transcript: Transcript) -> TierDirective:
    directive = extract_tier(transcript.text, default=ctx.settings.default_tier)
    logger.info("stage_tier_complete", tier=directive.tier.value, explicit=directive.explicit)
    if not directive.text:
        raise MissingInputError("Transcript is empty after the tier directive")
    return directive


def _run_classification(ctx: IngestContext, directive: TierDirective) -> ClassificationResult:
    return classify(directive.text, ctx.llm, ctx.settings)


def _run_cleaning(ctx: IngestContext, shape: Shape, directive: TierDirective) -> dict[str, Any]:
    return clean(shape, directive.text, directive.tier, ctx.llm, ctx.settings)


def _run_validation(shape: Shape, cleaned: dict[str, Any]) -> ShapeRecord:
    return validate_record(shape, cleaned)


def ingest_text(
    ctx: IngestContext,
    text: str,
    harbour_name: Optional[str] = None,
    row_id: Optional[str] = None,
) -> IngestOutcome:
    """Convenience wrapper for callers holding plain strings (CLI, resubmission)."""
    return run_ingestion(ctx, Transcript(text=text, harbour_name=harbour_name, row_id=row_id))
