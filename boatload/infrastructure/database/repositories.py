"""Infrastructure layer - store client over the entity table."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from .models import Key, Record, StoredEntity


class EntityRepository:
    """Key/value store operations for entities addressed by (kind, id).

    Mirrors a managed datastore client: keys are built per kind, saving under
    an incomplete key allocates the id, saving under a complete key
    overwrites (or re-creates) that entity.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def key(self, kind: str, entity_id: int | None = None) -> Key:
        return Key(str(kind), entity_id)

    async def save(self, key: Key, properties: Mapping[str, Any]) -> Key:
        """Save a property map under key and return the complete key."""
        if key.is_complete:
            stored = await self.session.get(StoredEntity, key.id)
            if stored is None:
                stored = StoredEntity(id=key.id, kind=key.kind)
            elif stored.kind != key.kind:
                raise ValueError(f"Key {key} does not address a {key.kind} entity")
        else:
            stored = StoredEntity(kind=key.kind)

        stored.properties = dict(properties)
        self.session.add(stored)
        await self.session.commit()
        await self.session.refresh(stored)

        if stored.id is None:
            raise RuntimeError(f"Store assigned no id to {key.kind} entity")
        return key.completed(stored.id)

    async def get(self, key: Key) -> Record | None:
        """Find the record stored under key."""
        if not key.is_complete:
            return None
        stored = await self.session.get(StoredEntity, key.id)
        if stored is None or stored.kind != key.kind:
            return None
        return stored.to_record()

    async def run_query(self, kind: str) -> list[Record]:
        """Get all records of a kind, in id order."""
        statement = (
            select(StoredEntity)
            .where(StoredEntity.kind == str(kind))
            .order_by(col(StoredEntity.id))
        )
        result = await self.session.execute(statement)
        return [stored.to_record() for stored in result.scalars().all()]

    async def delete(self, key: Key) -> bool:
        """Delete the entity under key. Returns False if nothing was stored."""
        if not key.is_complete:
            return False
        stored = await self.session.get(StoredEntity, key.id)
        if stored is None or stored.kind != key.kind:
            return False
        await self.session.delete(stored)
        await self.session.commit()
        return True
