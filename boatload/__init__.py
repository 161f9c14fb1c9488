"""Validated Boat and Load entities over an async key/value entity store."""

from .application.entity_service import (
    create_entity,
    delete_entity,
    get_all_entities,
    get_entity,
    update_entity,
)
from .domain.entities import Boat, Entity, EntityKind, Load
from .domain.exceptions import EntityValidationError, UnknownEntityKindError
from .infrastructure.database.models import Key, Record

__all__ = [
    "Boat",
    "Entity",
    "EntityKind",
    "EntityValidationError",
    "Key",
    "Load",
    "Record",
    "UnknownEntityKindError",
    "create_entity",
    "delete_entity",
    "get_all_entities",
    "get_entity",
    "update_entity",
]
