"""Entity construction with validation logging for the application layer."""

from collections.abc import Mapping
from typing import Any

from ..domain.entities import Entity, EntityKind, build_entity
from ..domain.exceptions import EntityValidationError
from ..logging_config import get_logger
from ..logging_utils import log_validation_error

logger = get_logger(__name__)


def build_entity_with_logging(kind: EntityKind, data: Mapping[str, Any]) -> Entity:
    """Construct the entity for kind, logging any validation failure.

    Raises:
        EntityValidationError: If fields are missing or break their rules
    """
    try:
        return build_entity(kind, data)
    except EntityValidationError as e:
        for field, reason in e.violations:
            log_validation_error(field, data.get(field), reason)
        logger.warning(
            f"{kind} creation failed - invalid entity",
            kind=str(kind),
            invalid_fields=[field for field, _ in e.violations],
        )
        raise
