"""LLM chains for shape classification and per-shape cleaning.

Both chains run exactly once per request: a malformed reply is reported to
the caller, never silently retried into a different answer.
"""

import json
import re

import structlog

from harbourmaster.config.prompts import (
    CLASSIFIER_SYSTEM_PROMPT,
    CLASSIFIER_USER_PROMPT,
    CLEANER_USER_PROMPT,
    CLEANING_PROMPTS,
)
from harbourmaster.config.settings import Settings
from harbourmaster.llm.client import TextGenerator
from harbourmaster.models.enums import Shape

logger = structlog.get_logger(__name__)


class LLMChainError(Exception):
    """The LLM replied, but the reply could not be parsed into a JSON object."""

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(message)
        self.raw_response = raw_response


class LLMInvocationError(Exception):
    """The LLM could not be reached or failed while generating."""

    pass


def _extract_json_from_text(text: str) -> str | None:
    """Try to extract the first balanced JSON object from text.

    Handles cases where the model outputs reasoning before the JSON,
    or wraps it in code blocks or quotes.

    Args:
        text: Text that may contain JSON.

    Returns:
        Extracted JSON string or None.
    """
    brace_count = 0
    start_idx = None
    in_string = False
    escape_next = False

    for i, char in enumerate(text):
        # Braces inside strings do not count
        if escape_next:
            escape_next = False
            continue
        if char == '\\' and in_string:
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if char == '{':
            if brace_count == 0:
                start_idx = i
            brace_count += 1
        elif char == '}' and brace_count > 0:
            brace_count -= 1
            if brace_count == 0 and start_idx is not None:
                return text[start_idx:i + 1]

    return None


def _clean_json_string(text: str) -> str:
    """Clean common issues in JSON strings from LLM output.

    Args:
        text: Raw JSON string.

    Returns:
        Cleaned JSON string.
    """
    # Remove any BOM or zero-width characters
    text = text.strip('\ufeff\u200b\u200c\u200d')

    # Remove trailing commas before } or ] (invalid JSON but common LLM mistake)
    text = re.sub(r',(\s*[}\]])', r'\1', text)

    return text


def parse_json_object(response: str) -> dict:
    """Parse a single JSON object from an LLM reply.

    Args:
        response: Raw LLM response string.

    Returns:
        Parsed JSON dict.

    Raises:
        LLMChainError: If no JSON object can be parsed from the reply.
    """
    if not response or not response.strip():
        raise LLMChainError("Empty response from LLM", response or "")

    text = response.strip()

    # Strategy 1: Remove markdown code blocks if present
    match = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text, re.IGNORECASE)
    if match and match.group(1).strip().startswith('{'):
        text = match.group(1).strip()

    # Strategy 2: Direct parsing attempt
    try:
        parsed = json.loads(_clean_json_string(text))
    except json.JSONDecodeError as e:
        logger.debug("direct_parse_failed", error=str(e))
    else:
        if isinstance(parsed, dict):
            return parsed
        raise LLMChainError(
            f"Expected a JSON object, got {type(parsed).__name__}", response
        )

    # Strategy 3: Extract JSON by brace matching (preamble or trailing prose)
    extracted = _extract_json_from_text(text)
    if extracted:
        try:
            return json.loads(_clean_json_string(extracted))
        except json.JSONDecodeError as e:
            logger.debug("extracted_parse_failed", error=str(e))

    logger.warning(
        "json_parse_error",
        error="Could not extract valid JSON",
        response_preview=text[:300],
    )
    raise LLMChainError(f"Failed to parse LLM JSON response. Response preview: {text[:150]}", response)


def _invoke(llm: TextGenerator, system: str, user: str, temperature: float, context_name: str) -> str:
    try:
        return llm.complete(system, user, temperature)
    except Exception as e:
        logger.error(f"{context_name}_llm_failed", error=str(e), error_type=type(e).__name__)
        raise LLMInvocationError(f"{context_name} LLM call failed: {e}") from e


def run_classification_chain(llm: TextGenerator, transcript: str, settings: Settings) -> dict:
    """Ask the LLM which shape a transcript belongs to.

    Args:
        llm: Text-completion collaborator.
        transcript: Tier-stripped transcript text.
        settings: Settings supplying the classifier temperature.

    Returns:
        Raw parsed reply, expected to hold shape, confidence and reasoning.
    """
    logger.debug("running_classification", text_length=len(transcript))

    response = _invoke(
        llm,
        CLASSIFIER_SYSTEM_PROMPT,
        CLASSIFIER_USER_PROMPT.format(transcript=transcript),
        settings.classifier_temperature,
        "classification",
    )
    return parse_json_object(response)


def run_cleaning_chain(llm: TextGenerator, shape: Shape, transcript: str, settings: Settings) -> dict:
    """Turn a transcript into a candidate record for the given shape.

    Args:
        llm: Text-completion collaborator.
        shape: Target shape; selects the instruction set.
        transcript: Tier-stripped transcript text.
        settings: Settings supplying the cleaner temperature.

    Returns:
        Candidate record (not yet validated).
    """
    logger.debug("running_cleaning", shape=shape.value, text_length=len(transcript))

    response = _invoke(
        llm,
        CLEANING_PROMPTS[shape],
        CLEANER_USER_PROMPT.format(transcript=transcript),
        settings.cleaner_temperature,
        "cleaning",
    )
    return parse_json_object(response)
