"""Persistence operations for Boat and Load entities.

Validation failures raise EntityValidationError; store failures are logged
and returned as ``False``. Callers cannot tell "not found" from a store
failure by the return value alone, only by the log level (warning vs error).
"""

import re
from collections.abc import Mapping
from typing import Any, Final, Literal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.entities import EntityKind
from ..infrastructure.database.models import Record
from ..infrastructure.database.repositories import EntityRepository
from ..logging_config import get_logger
from ..logging_utils import log_database_operation
from .validation import build_entity_with_logging

logger: Final = get_logger(__name__)

_DECIMAL_ID: Final = re.compile(r"-?\d+", re.ASCII)
MIN_STORE_ID: Final = -(2**63)
MAX_STORE_ID: Final = 2**63 - 1


def _coerce_id(entity_id: int | str) -> int | None:
    """Integer id within the store's signed 64-bit range, else None."""
    if isinstance(entity_id, bool):
        return None
    if isinstance(entity_id, int):
        numeric_id = entity_id
    elif isinstance(entity_id, str) and _DECIMAL_ID.fullmatch(entity_id):
        numeric_id = int(entity_id)
    else:
        return None
    if not MIN_STORE_ID <= numeric_id <= MAX_STORE_ID:
        return None
    return numeric_id


def _require_complete_key(record: Record) -> None:
    key = getattr(record, "key", None)
    if key is None or not key.is_complete:
        raise ValueError("Record has no complete store key; retrieve it first")


async def _store_failed(
    session: AsyncSession, operation: str, kind: str, error: SQLAlchemyError, **context
) -> Literal[False]:
    await session.rollback()
    log_database_operation(
        operation=operation, kind=kind, success=False, error=str(error), **context
    )
    logger.error(
        f"{kind} {operation} failed - store error",
        kind=kind,
        error=str(error),
        **context,
    )
    return False


async def create_entity(
    session: AsyncSession, kind: str | EntityKind, data: Mapping[str, Any]
) -> Record | Literal[False]:
    """Validate and store a new entity, returning the stored record.

    Args:
        session: Database session
        kind: "Boat" or "Load"
        data: Field bundle of the entity

    Returns:
        The stored record with its assigned id, or False on store error

    Raises:
        UnknownEntityKindError: If kind names no entity type
        EntityValidationError: If the field bundle is invalid
    """
    entity_kind: Final = EntityKind.parse(kind)
    logger.debug("Creating entity", kind=str(entity_kind))

    entity: Final = build_entity_with_logging(entity_kind, data)
    repository: Final = EntityRepository(session)

    try:
        key = await repository.save(
            repository.key(entity_kind), entity.get_entity_data()
        )
    except SQLAlchemyError as e:
        return await _store_failed(session, "create", entity_kind, e)

    log_database_operation(
        operation="create", kind=entity_kind, success=True, entity_id=key.id
    )
    logger.info("Entity created successfully", kind=str(entity_kind), entity_id=key.id)

    if key.id is None:
        raise RuntimeError(f"Store assigned no id to the new {entity_kind}")
    return await get_entity(session, entity_kind, key.id)


async def get_entity(
    session: AsyncSession, kind: str | EntityKind, entity_id: int | str
) -> Record | Literal[False]:
    """Get the record of kind with the given id.

    Args:
        session: Database session
        kind: "Boat" or "Load"
        entity_id: Integer id, or its decimal string form, in 64-bit range

    Returns:
        The record with "id" attached, or False if not found or on store error
    """
    entity_kind: Final = EntityKind.parse(kind)
    numeric_id: Final = _coerce_id(entity_id)
    if numeric_id is None:
        logger.warning(
            "Entity lookup failed - not a valid store id",
            kind=str(entity_kind),
            entity_id=repr(entity_id),
        )
        return False

    repository: Final = EntityRepository(session)
    try:
        record = await repository.get(repository.key(entity_kind, numeric_id))
    except SQLAlchemyError as e:
        return await _store_failed(session, "get", entity_kind, e, entity_id=numeric_id)

    if record is None:
        logger.warning(
            "Entity lookup failed - not found",
            kind=str(entity_kind),
            entity_id=numeric_id,
        )
        return False
    return record


async def get_all_entities(
    session: AsyncSession, kind: str | EntityKind
) -> list[Record] | Literal[False]:
    """Get every record of kind.

    Returns:
        Records in id order (empty if none), or False on store error
    """
    entity_kind: Final = EntityKind.parse(kind)
    repository: Final = EntityRepository(session)
    try:
        records = await repository.run_query(entity_kind)
    except SQLAlchemyError as e:
        return await _store_failed(session, "query", entity_kind, e)

    logger.debug("Entities retrieved", kind=str(entity_kind), count=len(records))
    return records


async def update_entity(session: AsyncSession, record: Record) -> bool:
    """Store the record's current properties under its key.

    Args:
        session: Database session
        record: A record previously returned by this module

    Returns:
        True if stored, False on store error

    Raises:
        ValueError: If the record carries no complete key
    """
    _require_complete_key(record)
    repository: Final = EntityRepository(session)
    try:
        await repository.save(record.key, record.properties())
    except SQLAlchemyError as e:
        return await _store_failed(
            session, "update", record.kind, e, entity_id=record.id
        )

    log_database_operation(
        operation="update", kind=record.kind, success=True, entity_id=record.id
    )
    logger.info("Entity updated successfully", kind=record.kind, entity_id=record.id)
    return True


async def delete_entity(session: AsyncSession, record: Record) -> bool:
    """Delete the entity the record's key addresses.

    Deleting an entity that is already gone succeeds.

    Returns:
        True if the key no longer addresses an entity, False on store error

    Raises:
        ValueError: If the record carries no complete key
    """
    _require_complete_key(record)
    repository: Final = EntityRepository(session)
    try:
        deleted = await repository.delete(record.key)
    except SQLAlchemyError as e:
        return await _store_failed(
            session, "delete", record.kind, e, entity_id=record.id
        )

    if not deleted:
        logger.warning(
            "Entity deletion found nothing to delete",
            kind=record.kind,
            entity_id=record.id,
        )
        return True

    log_database_operation(
        operation="delete", kind=record.kind, success=True, entity_id=record.id
    )
    logger.info("Entity deleted successfully", kind=record.kind, entity_id=record.id)
    return True
