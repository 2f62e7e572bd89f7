"""Stage 2: Cleaner - turn transcript text into a candidate record.

The LLM gets the shape's fixed instruction set and the tier-stripped text.
The tier is then force-injected for shapes that carry one.
"""

from types import MappingProxyType
from typing import Any

import structlog

from harbourmaster.config.settings import Settings
from harbourmaster.errors import CleanerParseError, CollaboratorError
from harbourmaster.llm.chains import LLMChainError, LLMInvocationError, run_cleaning_chain
from harbourmaster.llm.client import TextGenerator
from harbourmaster.models import Shape, Tier, require_every_shape

logger = structlog.get_logger(__name__)

TIERED_SHAPES = MappingProxyType({
    Shape.QNA: True,
    Shape.HARBOUR: False,
    Shape.WEATHER_PROFILE: False,
    Shape.MEDIA: True,
})
require_every_shape(TIERED_SHAPES, "TIERED_SHAPES")


def clean(shape: Shape, text: str, tier: Tier, llm: TextGenerator, settings: Settings) -> dict[str, Any]:
    """Produce the candidate record for ``shape``.

    Args:
        shape: Classified shape.
        text: Tier-stripped transcript.
        tier: Tier to force into the record (tiered shapes only).
        llm: Text-completion collaborator.
        settings: Supplies the cleaner temperature.

    Returns:
        Candidate record dict, not yet validated.

    Raises:
        CleanerParseError: The reply held no JSON object.
        CollaboratorError: The LLM could not be reached.
    """
    try:
        cleaned = run_cleaning_chain(llm, shape, text, settings)
    except LLMInvocationError as e:
        raise CollaboratorError(str(e), details={"stage": "cleaner", "shape": shape.value}) from e
    except LLMChainError as e:
        logger.error("cleaner_json_parse_failed", shape=shape.value, error=str(e))
        raise CleanerParseError(
            "JSON parse failed",
            details={"error": str(e), "raw_response": e.raw_response[:2000], "shape": shape.value},
        ) from e

    if TIERED_SHAPES[shape]:
        if cleaned.get("tier") not in (None, tier.value):
            logger.debug("tier_overridden", cleaner_tier=cleaned.get("tier"), tier=tier.value)
        cleaned["tier"] = tier.value

    logger.info("transcript_cleaned", shape=shape.value, fields=sorted(cleaned))
    return cleaned
