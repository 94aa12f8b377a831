"""Tests for the SQLite object store against a temporary database file."""

import pytest

from src.core import db_client
from src.core.db_client import RecordNotFoundError
from src.domain.plant import PlantCreate, RoomCreate
from src.services import plant_service, room_service


@pytest.fixture
async def sqlite_db(monkeypatch, tmp_path):
    """Point the store at a fresh database file and create the schema."""
    monkeypatch.setattr(db_client.settings, "sqlite_db_path", str(tmp_path / "plants.db"))
    await db_client.init_db()
    yield db_client
    await db_client.close_connection()


@pytest.mark.unit
class TestSQLiteStore:
    """Tests for the aiosqlite-backed store."""

    async def test_create_and_get(self, sqlite_db):
        created = await sqlite_db.create_record(collection="rooms", data={"name": "Küche"})

        fetched = await sqlite_db.get_record(collection="rooms", record_id=created["id"])

        assert fetched == {"name": "Küche", "id": created["id"]}

    async def test_get_missing_raises(self, sqlite_db):
        with pytest.raises(RecordNotFoundError, match="rooms"):
            await sqlite_db.get_record(collection="rooms", record_id="missing")

    async def test_update_merges(self, sqlite_db):
        created = await sqlite_db.create_record(collection="plants", data={"name": "Ficus", "archived": False})

        updated = await sqlite_db.update_record(collection="plants", record_id=created["id"], data={"archived": True})

        assert updated == {"name": "Ficus", "archived": True, "id": created["id"]}

    async def test_update_empty_payload_raises(self, sqlite_db):
        created = await sqlite_db.create_record(collection="plants", data={"name": "Ficus"})

        with pytest.raises(ValueError, match="Empty update payload"):
            await sqlite_db.update_record(collection="plants", record_id=created["id"], data={})

    async def test_delete_missing_raises(self, sqlite_db):
        with pytest.raises(RecordNotFoundError):
            await sqlite_db.delete_record(collection="tasks", record_id="missing")

    async def test_list_records_in_insertion_order(self, sqlite_db):
        for name in ("a", "b", "c"):
            await sqlite_db.create_record(collection="rooms", data={"name": name})

        records = await sqlite_db.list_records(collection="rooms")

        assert [r["name"] for r in records] == ["a", "b", "c"]

    async def test_list_by_index_matches_booleans(self, sqlite_db):
        await sqlite_db.create_record(collection="plants", data={"name": "a", "archived": True})
        await sqlite_db.create_record(collection="plants", data={"name": "b", "archived": False})

        archived = await sqlite_db.list_by_index(collection="plants", index="archived", value=True)

        assert [r["name"] for r in archived] == ["a"]

    async def test_invalid_collection_name_rejected(self, sqlite_db):
        with pytest.raises(ValueError, match="Invalid collection name"):
            await sqlite_db.list_records(collection="rooms; DROP TABLE rooms")

    async def test_invalid_index_name_rejected(self, sqlite_db):
        with pytest.raises(ValueError, match="Invalid index field"):
            await sqlite_db.list_by_index(collection="plants", index="name') OR 1=1 --", value="x")

    async def test_services_round_trip(self, sqlite_db):
        room = await room_service.create_room(room=RoomCreate(name="Bad"))
        plant = await plant_service.create_plant(plant=PlantCreate(room_id=room.id, name="Farn"))

        await plant_service.archive_plant(plant_id=plant.id)

        assert [p.id for p in await plant_service.get_archived_plants()] == [plant.id]
        assert await plant_service.get_plants_by_room(room_id=room.id) == []
