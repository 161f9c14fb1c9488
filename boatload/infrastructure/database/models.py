from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from sqlmodel import JSON, Column, Field, SQLModel

KIND_MAX_LENGTH = 64


class StoredEntity(SQLModel, table=True):  # type: ignore[call-arg]
    """A stored property map of some kind, addressed by (kind, id)."""

    id: int | None = Field(default=None, primary_key=True)
    kind: str = Field(index=True, min_length=1, max_length=KIND_MAX_LENGTH)

    # property map of the entity, JSON keeps it schemaless per kind
    properties: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    @property
    def key(self) -> "Key":
        return Key(self.kind, self.id)

    def to_record(self) -> "Record":
        """Convert persistence model to a caller-facing record."""
        return Record(self.key, self.properties or {})


@dataclass(frozen=True)
class Key:
    """Store key handle. A key without an id is incomplete until saved."""

    kind: str
    id: int | None = None

    @property
    def is_complete(self) -> bool:
        return self.id is not None

    def completed(self, entity_id: int) -> "Key":
        return replace(self, id=entity_id)


class Record(dict[str, Any]):
    """Stored properties plus the assigned ``"id"``, carrying its key.

    The key attribute is what update and delete operate on; the ``"id"``
    entry is for readers.
    """

    def __init__(self, key: Key, properties: Mapping[str, Any]):
        super().__init__(properties)
        self.key = key
        self["id"] = key.id

    @property
    def id(self) -> int | None:
        return self.key.id

    @property
    def kind(self) -> str:
        return self.key.kind

    def properties(self) -> dict[str, Any]:
        """Current properties to store, without the attached id."""
        return {name: value for name, value in self.items() if name != "id"}
