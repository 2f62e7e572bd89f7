"""Stage 0: Tier Extractor - strip an explicit tier directive.

A transcript may open with ``TIER: FREE``, ``TIER: PRO`` or ``TIER: EXCLUSIVE``
(any case). The directive is removed before classification and the tier is
force-injected into the cleaned record later, so the Cleaner's own judgment
never decides the tier.
"""

import re

import structlog

from harbourmaster.models import Tier, TierDirective

logger = structlog.get_logger(__name__)

TIER_DIRECTIVE_PATTERN = re.compile(
    r"^\s*TIER\s*:\s*(FREE|PRO|EXCLUSIVE)\b[\s.,;:\-]*",
    re.IGNORECASE,
)


def extract_tier(text: str, default: Tier | str = Tier.PRO) -> TierDirective:
    """Detect and remove a leading tier directive.

    Args:
        text: Raw transcript text.
        default: Tier used when no directive is present.

    Returns:
        TierDirective with the tier and the remaining working text.
    """
    match = TIER_DIRECTIVE_PATTERN.match(text)
    if not match:
        return TierDirective(tier=Tier(default), explicit=False, text=text.strip())

    tier = Tier(match.group(1).lower())
    remaining = text[match.end():].strip()

    logger.debug("tier_directive_found", tier=tier.value)
    return TierDirective(tier=tier, explicit=True, text=remaining)
