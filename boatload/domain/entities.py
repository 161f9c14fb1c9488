"""Pure domain entities without infrastructure dependencies."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Any, ClassVar

from .constants import (
    CREATION_DATE_PATTERN,
    MAX_QUANTITY,
    MAX_TEXT_LENGTH,
    MIN_QUANTITY,
    MIN_TEXT_LENGTH,
)
from .exceptions import EntityValidationError, UnknownEntityKindError
from .rules import Rule, max_length, max_val, min_length, min_val, of_form, violates

_TEXT_RULES: tuple[Rule, ...] = (
    min_length(MIN_TEXT_LENGTH),
    max_length(MAX_TEXT_LENGTH),
)
_QUANTITY_RULES: tuple[Rule, ...] = (
    min_val(MIN_QUANTITY),
    max_val(MAX_QUANTITY),
)


@dataclass
class Entity(ABC):
    """Common validation contract for storable entities.

    Concrete entities declare their fields as dataclass fields defaulting to
    None (missing) and their per-field rules in ``RULES``. Construction fails
    with EntityValidationError when the instance is invalid, so an invalid
    entity never reaches the caller.
    """

    RULES: ClassVar[Mapping[str, tuple[Rule, ...]]] = {}

    def __post_init__(self):
        """Validate entity data after initialization."""
        if self.instance_is_invalid():
            raise EntityValidationError(
                self._failure_message(), violations=self.violations()
            )

    @classmethod
    def validation_rules(cls) -> Mapping[str, tuple[Rule, ...]]:
        return cls.RULES

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @abstractmethod
    def get_entity_data(self) -> dict[str, Any]:
        """Return exactly the persistable fields of this entity."""
        raise NotImplementedError(
            f"{type(self).__name__} must override get_entity_data()"
        )

    def props_are_missing(self) -> bool:
        """Check if any declared field is missing."""
        return any(getattr(self, name) is None for name in self.field_names())

    def prop_fails_validation_rules(self) -> bool:
        """Check if any field breaks one of its rules, stopping at the first."""
        for prop, rules in self.validation_rules().items():
            actual_value = getattr(self, prop)
            for rule in rules:
                if violates(actual_value, rule):
                    return True
        return False

    def instance_is_invalid(self) -> bool:
        return self.props_are_missing() or self.prop_fails_validation_rules()

    def violations(self) -> list[tuple[str, str]]:
        """List every (field, reason) pair that makes the instance invalid."""
        found: list[tuple[str, str]] = []
        for name in self.field_names():
            if getattr(self, name) is None:
                found.append((name, "missing"))
        for prop, rules in self.validation_rules().items():
            actual_value = getattr(self, prop)
            if actual_value is None:
                continue
            for rule in rules:
                if violates(actual_value, rule):
                    found.append((prop, f"violates {rule.describe()}"))
        return found

    def _failure_message(self) -> str:
        props = ", ".join(
            f"{prop}: {getattr(self, prop)!r}" for prop in self.validation_rules()
        )
        return (
            f"{type(self).__name__} instance failed to initiate with properties "
            + props
        )


@dataclass
class Boat(Entity):
    """A boat owned by a user."""

    name: str | None = None
    type: str | None = None
    length: int | None = None
    user: str | None = None  # owner, not validated

    RULES: ClassVar[Mapping[str, tuple[Rule, ...]]] = {
        "name": _TEXT_RULES,
        "type": _TEXT_RULES,
        "length": _QUANTITY_RULES,
    }

    def get_entity_data(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "length": self.length,
            "user": self.user,
        }


@dataclass
class Load(Entity):
    """A load of cargo created by a user on a given date (DD/MM/YYYY)."""

    volume: int | None = None
    item: str | None = None
    creation_date: str | None = None
    user: str | None = None

    RULES: ClassVar[Mapping[str, tuple[Rule, ...]]] = {
        "volume": _QUANTITY_RULES,
        "item": _TEXT_RULES,
        "creation_date": (of_form(CREATION_DATE_PATTERN),),
    }

    def get_entity_data(self) -> dict[str, Any]:
        return {
            "volume": self.volume,
            "item": self.item,
            "creation_date": self.creation_date,
            "user": self.user,
        }


class EntityKind(StrEnum):
    """Entity type discriminator, also used as the store's kind name."""

    BOAT = "Boat"
    LOAD = "Load"

    @classmethod
    def parse(cls, kind: "str | EntityKind") -> "EntityKind":
        try:
            return cls(kind)
        except ValueError:
            raise UnknownEntityKindError(f"Unknown entity kind: {kind!r}") from None

    @property
    def entity_class(self) -> type[Entity]:
        match self:
            case EntityKind.BOAT:
                return Boat
            case EntityKind.LOAD:
                return Load


def build_entity(kind: "str | EntityKind", data: Mapping[str, Any]) -> Entity:
    """Construct (and so validate) the entity selected by kind.

    Keys of data that the entity does not declare are ignored.

    Raises:
        UnknownEntityKindError: If kind names no entity type
        EntityValidationError: If fields are missing or break their rules
    """
    entity_class: type[Entity] = EntityKind.parse(kind).entity_class
    accepted = set(entity_class.field_names())
    return entity_class(**{k: v for k, v in data.items() if k in accepted})
