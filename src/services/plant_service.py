"""Plant service for CRUD operations, the plant cemetery and cascading deletes."""

import logging

from src.core import db_client
from src.core.clock import Clock, utc_now
from src.core.db_client import ObjectStore
from src.core.logging import log_with_plant_context, span
from src.domain.plant import Plant, PlantCreate


logger = logging.getLogger(__name__)

COLLECTION = "plants"

# Collections holding records that belong to a plant via ``plant_id``
DEPENDENT_COLLECTIONS = ("images", "tasks", "tips")


async def create_plant(*, plant: PlantCreate, db: ObjectStore = db_client, clock: Clock = utc_now) -> Plant:
    """Create a new plant in a room."""
    with span("plant_service.create_plant"):
        data = {**plant.model_dump(mode="json"), "archived": False, "created_at": clock().isoformat()}
        record = await db.create_record(collection=COLLECTION, data=data)
        logger.info("Created plant '%s' in room %s", plant.name, plant.room_id)
        return Plant.model_validate(record)


async def get_plant(*, plant_id: str, db: ObjectStore = db_client) -> Plant:
    """Get a plant by ID, archived or not.

    Raises:
        RecordNotFoundError: If the plant does not exist
    """
    record = await db.get_record(collection=COLLECTION, record_id=plant_id)
    return Plant.model_validate(record)


async def update_plant(*, plant: Plant, db: ObjectStore = db_client) -> Plant:
    """Write a plant back in full."""
    with span("plant_service.update_plant"):
        data = plant.model_dump(mode="json", exclude={"id"})
        record = await db.put_record(collection=COLLECTION, record_id=plant.id, data=data)
        return Plant.model_validate(record)


async def get_all_plants(*, db: ObjectStore = db_client) -> list[Plant]:
    """List all active (non-archived) plants."""
    records = await db.list_records(collection=COLLECTION)
    return [plant for plant in (Plant.model_validate(r) for r in records) if not plant.archived]


async def get_archived_plants(*, db: ObjectStore = db_client) -> list[Plant]:
    """List archived plants (the cemetery), most recently archived first."""
    records = await db.list_by_index(collection=COLLECTION, index="archived", value=True)
    plants = [Plant.model_validate(r) for r in records]
    return sorted(plants, key=lambda p: p.archived_at.timestamp() if p.archived_at else 0.0, reverse=True)


async def get_plants_by_room(*, room_id: str, db: ObjectStore = db_client) -> list[Plant]:
    """List the active plants of a room."""
    records = await db.list_by_index(collection=COLLECTION, index="room_id", value=room_id)
    return [plant for plant in (Plant.model_validate(r) for r in records) if not plant.archived]


async def archive_plant(*, plant_id: str, db: ObjectStore = db_client, clock: Clock = utc_now) -> Plant:
    """Move a plant to the cemetery.

    Raises:
        RecordNotFoundError: If the plant does not exist
    """
    with span("plant_service.archive_plant"):
        record = await db.update_record(
            collection=COLLECTION,
            record_id=plant_id,
            data={"archived": True, "archived_at": clock().isoformat()},
        )
        log_with_plant_context(logger, "info", "Archived plant", plant_id=plant_id)
        return Plant.model_validate(record)


async def restore_plant(*, plant_id: str, db: ObjectStore = db_client) -> Plant:
    """Bring a plant back from the cemetery.

    Raises:
        RecordNotFoundError: If the plant does not exist
    """
    with span("plant_service.restore_plant"):
        record = await db.update_record(
            collection=COLLECTION,
            record_id=plant_id,
            data={"archived": False, "archived_at": None},
        )
        log_with_plant_context(logger, "info", "Restored plant", plant_id=plant_id)
        return Plant.model_validate(record)


async def delete_plant(*, plant_id: str, db: ObjectStore = db_client, clock: Clock = utc_now) -> Plant:
    """Delete a plant from the user's point of view, which archives it."""
    return await archive_plant(plant_id=plant_id, db=db, clock=clock)


async def permanently_delete_plant(*, plant_id: str, db: ObjectStore = db_client) -> None:
    """Delete a plant together with its images, tasks and tips.

    Raises:
        RecordNotFoundError: If the plant does not exist
    """
    with span("plant_service.permanently_delete_plant"):
        # Fail before touching dependents when the plant is unknown
        await db.get_record(collection=COLLECTION, record_id=plant_id)

        for collection in DEPENDENT_COLLECTIONS:
            records = await db.list_by_index(collection=collection, index="plant_id", value=plant_id)
            for record in records:
                await db.delete_record(collection=collection, record_id=record["id"])
            log_with_plant_context(logger, "debug", f"Removed {len(records)} {collection}", plant_id=plant_id)

        await db.delete_record(collection=COLLECTION, record_id=plant_id)
        log_with_plant_context(logger, "info", "Permanently deleted plant", plant_id=plant_id)
