"""Tests for the async persistence operations over an in-memory store."""

import logging

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from boatload import (
    EntityValidationError,
    Record,
    UnknownEntityKindError,
    create_entity,
    delete_entity,
    get_all_entities,
    get_entity,
    update_entity,
)
from boatload.infrastructure.database.models import Key
from boatload.infrastructure.database.repositories import EntityRepository


async def _raise_store_error(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("store unavailable"))


@pytest.mark.asyncio
async def test_create_boat_returns_stored_record(
    async_session: AsyncSession, boat_data: dict
):
    """Test boat creation.

    Covers:
    - The stored record carries an integer id and its key
    - Original field values come back unchanged
    """
    record = await create_entity(async_session, "Boat", boat_data)

    assert record is not False
    assert isinstance(record["id"], int)
    assert record.key == Key("Boat", record["id"])
    assert record.properties() == boat_data
    assert {k: v for k, v in record.items() if k != "id"} == boat_data


@pytest.mark.asyncio
async def test_create_load_returns_stored_record(
    async_session: AsyncSession, load_data: dict
):
    record = await create_entity(async_session, "Load", load_data)

    assert record is not False
    assert record.kind == "Load"
    assert record["creation_date"] == "25/12/2024"


@pytest.mark.asyncio
async def test_create_invalid_entity_raises_and_stores_nothing(
    async_session: AsyncSession, boat_data: dict
):
    """Validation failures raise instead of returning the store sentinel."""
    del boat_data["type"]

    with pytest.raises(EntityValidationError):
        await create_entity(async_session, "Boat", boat_data)

    assert await get_all_entities(async_session, "Boat") == []


@pytest.mark.asyncio
async def test_create_invalid_entity_logs_offending_field(
    async_session: AsyncSession, boat_data: dict, caplog: pytest.LogCaptureFixture
):
    boat_data["length"] = 10000
    caplog.set_level(logging.WARNING, logger="validation")

    with pytest.raises(EntityValidationError):
        await create_entity(async_session, "Boat", boat_data)

    assert "Validation failed for field 'length'" in caplog.text


@pytest.mark.asyncio
async def test_get_entity_by_int_or_string_id(
    async_session: AsyncSession, boat_data: dict
):
    created = await create_entity(async_session, "Boat", boat_data)
    assert created is not False

    by_int = await get_entity(async_session, "Boat", created.id)
    by_str = await get_entity(async_session, "Boat", str(created.id))

    assert by_int == created
    assert by_str == created


@pytest.mark.asyncio
async def test_get_missing_entity_returns_false(async_session: AsyncSession):
    assert await get_entity(async_session, "Boat", 424242) is False
    assert await get_entity(async_session, "Boat", "not-a-number") is False


@pytest.mark.asyncio
@pytest.mark.parametrize("entity_id", [2**63, 2**70, -(2**64), "9" * 30])
async def test_get_entity_out_of_store_range_returns_false(
    async_session: AsyncSession, entity_id: int | str
):
    """Ids the store cannot hold are simply not found."""
    assert await get_entity(async_session, "Boat", entity_id) is False


@pytest.mark.asyncio
async def test_get_entity_rejects_loose_id_forms(
    async_session: AsyncSession, boat_data: dict
):
    """Test id coercion.

    Covers:
    - Floats are not truncated to a stored id
    - Only plain decimal strings address an entity
    """
    created = await create_entity(async_session, "Boat", boat_data)
    assert created is not False
    entity_id = created.id
    assert entity_id is not None

    loose_ids = [entity_id + 0.9, float(entity_id), f" {entity_id} ", "1_0", "+1", True]
    for loose_id in loose_ids:
        found = await get_entity(async_session, "Boat", loose_id)  # type: ignore[arg-type]
        assert found is False

    assert await get_entity(async_session, "Boat", str(entity_id)) == created


@pytest.mark.asyncio
async def test_get_entity_of_other_kind_returns_false(
    async_session: AsyncSession, boat_data: dict
):
    created = await create_entity(async_session, "Boat", boat_data)
    assert created is not False

    assert await get_entity(async_session, "Load", created.id) is False


@pytest.mark.asyncio
async def test_get_all_entities_empty(async_session: AsyncSession):
    assert await get_all_entities(async_session, "Load") == []


@pytest.mark.asyncio
async def test_get_all_entities_filters_by_kind(
    async_session: AsyncSession, boat_data: dict, load_data: dict
):
    first = await create_entity(async_session, "Boat", boat_data)
    second = await create_entity(async_session, "Boat", {**boat_data, "name": "Orca"})
    await create_entity(async_session, "Load", load_data)

    boats = await get_all_entities(async_session, "Boat")

    assert boats is not False
    assert [boat["name"] for boat in boats] == ["Sea Witch", "Orca"]
    assert [boat.id for boat in boats] == [first["id"], second["id"]]
    assert all(isinstance(boat, Record) for boat in boats)


@pytest.mark.asyncio
async def test_update_entity_is_visible_to_later_get(
    async_session: AsyncSession, boat_data: dict
):
    """Test updating a retrieved record.

    Covers:
    - Mutated fields are stored under the record's key
    - The attached id is not stored as a property
    """
    record = await create_entity(async_session, "Boat", boat_data)
    assert record is not False

    record["name"] = "Sea Witch II"
    record["length"] = 30
    assert await update_entity(async_session, record) is True

    fetched = await get_entity(async_session, "Boat", record.id)
    assert fetched is not False
    assert fetched["name"] == "Sea Witch II"
    assert fetched["length"] == 30
    assert fetched.properties() == {
        **boat_data,
        "name": "Sea Witch II",
        "length": 30,
    }


@pytest.mark.asyncio
async def test_update_after_delete_recreates_under_same_id(
    async_session: AsyncSession, load_data: dict
):
    record = await create_entity(async_session, "Load", load_data)
    assert record is not False

    assert await delete_entity(async_session, record) is True
    assert await update_entity(async_session, record) is True

    fetched = await get_entity(async_session, "Load", record.id)
    assert fetched == record


@pytest.mark.asyncio
async def test_delete_entity_then_get_returns_false(
    async_session: AsyncSession, boat_data: dict
):
    record = await create_entity(async_session, "Boat", boat_data)
    assert record is not False

    assert await delete_entity(async_session, record) is True
    assert await get_entity(async_session, "Boat", record.id) is False

    # Deleting again is a no-op
    assert await delete_entity(async_session, record) is True


@pytest.mark.asyncio
async def test_update_and_delete_require_stored_key(async_session: AsyncSession):
    with pytest.raises(ValueError):
        await update_entity(async_session, {"name": "loose"})  # type: ignore[arg-type]

    unsaved = Record(Key("Boat"), {"name": "unsaved"})
    with pytest.raises(ValueError):
        await delete_entity(async_session, unsaved)


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", ["Ship", "boat"])
async def test_unknown_kind_raises(
    async_session: AsyncSession, boat_data: dict, kind: str
):
    with pytest.raises(UnknownEntityKindError):
        await create_entity(async_session, kind, boat_data)
    with pytest.raises(UnknownEntityKindError):
        await get_entity(async_session, kind, 1)
    with pytest.raises(UnknownEntityKindError):
        await get_all_entities(async_session, kind)


@pytest.mark.asyncio
async def test_store_errors_become_false(
    async_session: AsyncSession,
    boat_data: dict,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
):
    """Test the store failure channel.

    Covers:
    - Every operation returns False instead of raising on store errors
    - Failures are logged on the database logger
    """
    record = await create_entity(async_session, "Boat", boat_data)
    assert record is not False

    monkeypatch.setattr(EntityRepository, "save", _raise_store_error)
    monkeypatch.setattr(EntityRepository, "get", _raise_store_error)
    monkeypatch.setattr(EntityRepository, "run_query", _raise_store_error)
    monkeypatch.setattr(EntityRepository, "delete", _raise_store_error)
    caplog.set_level(logging.ERROR, logger="database")

    assert await create_entity(async_session, "Boat", boat_data) is False
    assert await get_entity(async_session, "Boat", record.id) is False
    assert await get_all_entities(async_session, "Boat") is False
    assert await update_entity(async_session, record) is False
    assert await delete_entity(async_session, record) is False

    for operation in ("create", "get", "query", "update", "delete"):
        assert f"Database {operation} on Boat failed" in caplog.text


@pytest.mark.asyncio
async def test_validation_error_is_not_swallowed_by_store_handling(
    async_session: AsyncSession, load_data: dict, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setattr(EntityRepository, "save", _raise_store_error)

    with pytest.raises(EntityValidationError):
        await create_entity(async_session, "Load", {**load_data, "volume": 0})
