"""Stage 3: Schema Validator - structural, type and enum checks per shape.

Validators are the canonical record models, compiled once at import into a
read-only mapping keyed by shape.
"""

from types import MappingProxyType
from typing import Any

import structlog
from pydantic import ValidationError

from harbourmaster.errors import SchemaValidationError
from harbourmaster.models import (
    HarbourRecord,
    MediaRecord,
    QnARecord,
    Shape,
    ShapeRecord,
    Violation,
    WeatherProfileRecord,
    require_every_shape,
)

logger = structlog.get_logger(__name__)

RECORD_MODELS = MappingProxyType({
    Shape.QNA: QnARecord,
    Shape.HARBOUR: HarbourRecord,
    Shape.WEATHER_PROFILE: WeatherProfileRecord,
    Shape.MEDIA: MediaRecord,
})
require_every_shape(RECORD_MODELS, "RECORD_MODELS")


def _violations(error: ValidationError) -> list[Violation]:
    violations = []
    for item in error.errors():
        path = "/" + "/".join(str(part) for part in item["loc"])
        violations.append(Violation(path=path, reason=item["msg"], type=item["type"]))
    return violations


def validate_record(shape: Shape, cleaned: dict[str, Any]) -> ShapeRecord:
    """Validate a candidate record against its shape's model.

    Returns:
        The typed canonical record.

    Raises:
        SchemaValidationError: With the full violation list in ``details``.
    """
    try:
        record = RECORD_MODELS[shape].model_validate(cleaned)
    except ValidationError as e:
        violations = _violations(e)
        logger.warning(
            "schema_validation_failed",
            shape=shape.value,
            violation_count=len(violations),
            paths=[v.path for v in violations],
        )
        raise SchemaValidationError(
            "Schema validation failed",
            details={
                "table": shape.value,
                "violations": [v.model_dump() for v in violations],
            },
            payload=cleaned,
        ) from e

    logger.debug("schema_validation_passed", shape=shape.value)
    return record
