"""Stage 4: Guardrail Engine - content rules a schema cannot express.

Q&A only:
- pro: the answer is numbered steps, at least "1." followed later by "2."
- free: the answer is at most two sentences
"""

import re

import structlog

from harbourmaster.errors import GuardrailViolationError
from harbourmaster.models import QnARecord, Shape, ShapeRecord, Tier

logger = structlog.get_logger(__name__)

FREE_TIER_MAX_SENTENCES = 2

FIRST_STEP_PATTERN = re.compile(r"(?<!\d)1\.(?:\s|$)")
SECOND_STEP_PATTERN = re.compile(r"(?<!\d)2\.(?:\s|$)")
SENTENCE_BREAK_PATTERN = re.compile(r"[.!?]\s")
SENTENCE_END_PATTERN = re.compile(r"[.!?]$")


def sentence_count(text: str) -> int:
    """Count sentences by terminal punctuation followed by whitespace or end of text."""
    trimmed = text.strip()
    if not trimmed:
        return 0
    breaks = len(SENTENCE_BREAK_PATTERN.findall(trimmed))
    return breaks + (1 if SENTENCE_END_PATTERN.search(trimmed) else 0)


def has_numbered_steps(text: str) -> bool:
    first = FIRST_STEP_PATTERN.search(text)
    if first is None:
        return False
    return SECOND_STEP_PATTERN.search(text, first.end()) is not None


def check_guardrails(shape: Shape, record: ShapeRecord) -> None:
    """Apply content-level rules to a validated record.

    Raises:
        GuardrailViolationError: With the offending cleaned record as payload.
    """
    if shape is not Shape.QNA:
        return
    if not isinstance(record, QnARecord):
        raise TypeError(f"Expected QnARecord for {shape.value}, got {type(record).__name__}")

    cleaned = record.model_dump(mode="json")

    if record.tier is Tier.PRO and not has_numbered_steps(record.answer):
        logger.warning("guardrail_violation", tier="pro", issue="missing_numbered_steps")
        raise GuardrailViolationError(
            "Pro tier requires numbered steps (1. 2. 3.)",
            details={"tier": "pro", "issue": "missing_numbered_steps"},
            payload=cleaned,
        )

    if record.tier is Tier.FREE:
        sentences = sentence_count(record.answer)
        if sentences > FREE_TIER_MAX_SENTENCES:
            logger.warning("guardrail_violation", tier="free", sentence_count=sentences)
            raise GuardrailViolationError(
                f"Free tier answer too long ({sentences} sentences, max {FREE_TIER_MAX_SENTENCES})",
                details={
                    "tier": "free",
                    "issue": "too_many_sentences",
                    "sentence_count": sentences,
                    "max_allowed": FREE_TIER_MAX_SENTENCES,
                },
                payload=cleaned,
            )
