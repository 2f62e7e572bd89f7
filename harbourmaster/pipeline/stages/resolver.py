"""Stage 5: Reference Resolver - map a harbour name to its registry id.

Exact case-insensitive match only. Similar registry names are reported as
suggestions for the reviewer, never substituted.
"""

from typing import Optional

import structlog
from rapidfuzz import fuzz

from harbourmaster.errors import MissingReferenceError
from harbourmaster.models import QnARecord, Shape, ShapeRecord
from harbourmaster.storage.gateway import PersistenceGateway

logger = structlog.get_logger(__name__)

SUGGESTION_MIN_SCORE = 75
MAX_SUGGESTIONS = 3


def harbour_name_of(record: ShapeRecord) -> Optional[str]:
    if isinstance(record, QnARecord):
        return record.harbour
    return getattr(record, "harbour_name", None)


def suggest_names(name: str, candidates: list[str]) -> list[str]:
    """Registry names similar to ``name``, best first."""
    scored = [
        (fuzz.ratio(name.lower(), candidate.lower()), candidate)
        for candidate in candidates
    ]
    scored = [item for item in scored if item[0] >= SUGGESTION_MIN_SCORE]
    scored.sort(key=lambda item: -item[0])
    return [candidate for _, candidate in scored[:MAX_SUGGESTIONS]]


def resolve_reference(
    shape: Shape,
    record: ShapeRecord,
    hint: Optional[str],
    gateway: PersistenceGateway,
) -> Optional[str]:
    """Resolve the harbour a record depends on.

    Args:
        shape: Shape of the validated record.
        record: Validated canonical record.
        hint: Harbour name supplied with the request, used when the record
            carries none.
        gateway: Registry access.

    Returns:
        The harbour id, or None for harbour master records.

    Raises:
        MissingReferenceError: No name, no match, or more than one match.
    """
    if shape is Shape.HARBOUR:
        return None

    name = (harbour_name_of(record) or hint or "").strip()
    if not name:
        raise MissingReferenceError(
            "Harbour name missing",
            details={"harbour_name": None, "matches": 0, "suggestions": [], "table": shape.value},
            payload=record.model_dump(mode="json"),
        )

    matches = gateway.find_harbours(name)
    if len(matches) == 1:
        harbour_id, _ = matches[0]
        logger.debug("harbour_resolved", harbour_name=name, harbour_id=harbour_id)
        return harbour_id

    suggestions = suggest_names(name, gateway.harbour_names()) if not matches else []
    reason = "Harbour not found" if not matches else "Harbour name is ambiguous"
    logger.warning(
        "harbour_unresolved",
        harbour_name=name,
        matches=len(matches),
        suggestions=suggestions,
    )
    raise MissingReferenceError(
        f"{reason}: {name}",
        details={
            "harbour_name": name,
            "matches": len(matches),
            "suggestions": suggestions,
            "table": shape.value,
        },
        payload=record.model_dump(mode="json"),
    )
