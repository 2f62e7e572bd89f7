"""Stage 1: Shape Classifier - decide which record shape a transcript is.

HYBRID APPROACH:
- Deterministic rules first: reserved prefixes, then keyword co-occurrence
- LLM fallback only when no rule fires, with a schema-validated reply
- Fallback confidence below the threshold never proceeds to cleaning
"""

import re
from typing import Optional

import structlog
from pydantic import BaseModel, Field, ValidationError

from harbourmaster.config.settings import Settings
from harbourmaster.errors import ClassifierParseError, CollaboratorError, LowConfidenceError
from harbourmaster.llm.chains import LLMChainError, LLMInvocationError, run_classification_chain
from harbourmaster.llm.client import TextGenerator
from harbourmaster.models import ClassificationMethod, ClassificationResult, Shape

logger = structlog.get_logger(__name__)


# =============================================================================
# Deterministic Rules
# =============================================================================

SHAPE_PREFIXES: tuple[tuple[str, Shape], ...] = (
    ("QUESTION:", Shape.QNA),
    ("HARBOUR:", Shape.HARBOUR),
    ("WEATHER:", Shape.WEATHER_PROFILE),
    ("MEDIA:", Shape.MEDIA),
)

# Spoken transcripts often lose the colon a strict prefix needs
KEYWORD_MARKERS = (
    re.compile(r"\bquestion\b", re.IGNORECASE),
    re.compile(r"\banswer\b", re.IGNORECASE),
)

KEYWORD_CONFIDENCE = 0.99


class FallbackClassification(BaseModel):
    """Schema the fallback classifier's JSON reply must satisfy."""

    shape: Shape
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: Optional[str] = Field(default=None, max_length=1000)


def classify_by_prefix(text: str) -> Optional[ClassificationResult]:
    upper = text.strip().upper()
    for prefix, shape in SHAPE_PREFIXES:
        if upper.startswith(prefix):
            return ClassificationResult(
                shape=shape,
                confidence=1.0,
                method=ClassificationMethod.PREFIX,
            )
    return None


def classify_by_keywords(text: str) -> Optional[ClassificationResult]:
    if all(marker.search(text) for marker in KEYWORD_MARKERS):
        return ClassificationResult(
            shape=Shape.QNA,
            confidence=KEYWORD_CONFIDENCE,
            method=ClassificationMethod.KEYWORD,
            reasoning="question and answer markers both present",
        )
    return None


def classify_with_llm(text: str, llm: TextGenerator, settings: Settings) -> ClassificationResult:
    """Fallback classification via the text-completion collaborator.

    Raises:
        ClassifierParseError: Reply was not a valid classification.
        CollaboratorError: The LLM could not be reached.
    """
    try:
        raw = run_classification_chain(llm, text, settings)
    except LLMInvocationError as e:
        raise CollaboratorError(str(e), details={"stage": "classifier"}) from e
    except LLMChainError as e:
        raise ClassifierParseError(
            "Shape classification failed: unparseable reply",
            details={"error": str(e), "raw_response": e.raw_response[:1000]},
        ) from e

    try:
        decision = FallbackClassification.model_validate(raw)
    except ValidationError as e:
        raise ClassifierParseError(
            "Shape classification failed: invalid reply",
            details={"error": str(e), "reply": raw},
        ) from e

    logger.info(
        "fallback_classification",
        shape=decision.shape.value,
        confidence=decision.confidence,
        reasoning=decision.reasoning,
    )
    return ClassificationResult(
        shape=decision.shape,
        confidence=decision.confidence,
        method=ClassificationMethod.FALLBACK,
        reasoning=decision.reasoning,
    )


def classify(text: str, llm: TextGenerator, settings: Settings) -> ClassificationResult:
    """Classify a (tier-stripped) transcript into exactly one shape.

    Args:
        text: Working transcript text.
        llm: Text-completion collaborator, used only on the fallback path.
        settings: Supplies the confidence threshold and classifier temperature.

    Returns:
        ClassificationResult safe to proceed with.

    Raises:
        LowConfidenceError: Fallback confidence below the threshold.
        ClassifierParseError: Fallback reply could not be parsed.
        CollaboratorError: The LLM could not be reached.
    """
    result = classify_by_prefix(text) or classify_by_keywords(text)
    if result is None:
        result = classify_with_llm(text, llm, settings)

        if result.confidence < settings.confidence_threshold:
            logger.warning(
                "low_classification_confidence",
                confidence=result.confidence,
                suggested_shape=result.shape.value,
            )
            raise LowConfidenceError(
                f"Classification confidence too low: {result.confidence}",
                details={
                    "confidence": result.confidence,
                    "suggested_shape": result.shape.value,
                    "reasoning": result.reasoning,
                    "threshold": settings.confidence_threshold,
                },
            )

    logger.info(
        "shape_classified",
        shape=result.shape.value,
        method=result.method.value,
        confidence=result.confidence,
    )
    return result
