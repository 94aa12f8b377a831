"""Room service for CRUD operations."""

import logging

from src.core import db_client
from src.core.db_client import ObjectStore
from src.core.logging import span
from src.domain.plant import Room, RoomCreate
from src.services import plant_service


logger = logging.getLogger(__name__)

COLLECTION = "rooms"


async def get_all_rooms(*, db: ObjectStore = db_client) -> list[Room]:
    """List all rooms."""
    records = await db.list_records(collection=COLLECTION)
    return [Room.model_validate(r) for r in records]


async def get_room(*, room_id: str, db: ObjectStore = db_client) -> Room:
    """Get a room by ID.

    Raises:
        RecordNotFoundError: If the room does not exist
    """
    record = await db.get_record(collection=COLLECTION, record_id=room_id)
    return Room.model_validate(record)


async def create_room(*, room: RoomCreate, db: ObjectStore = db_client) -> Room:
    """Create a room."""
    with span("room_service.create_room"):
        record = await db.create_record(collection=COLLECTION, data=room.model_dump(mode="json"))
        logger.info("Created room '%s'", room.name)
        return Room.model_validate(record)


async def update_room(*, room: Room, db: ObjectStore = db_client) -> Room:
    """Write a room back in full."""
    with span("room_service.update_room"):
        data = room.model_dump(mode="json", exclude={"id"})
        record = await db.put_record(collection=COLLECTION, record_id=room.id, data=data)
        return Room.model_validate(record)


async def delete_room(*, room_id: str, db: ObjectStore = db_client) -> None:
    """Delete a room and permanently delete every plant in it, archived ones included.

    Raises:
        RecordNotFoundError: If the room does not exist
    """
    with span("room_service.delete_room"):
        plants = await db.list_by_index(collection="plants", index="room_id", value=room_id)
        for plant in plants:
            await plant_service.permanently_delete_plant(plant_id=plant["id"], db=db)

        await db.delete_record(collection=COLLECTION, record_id=room_id)
        logger.info("Deleted room %s with %d plants", room_id, len(plants))
