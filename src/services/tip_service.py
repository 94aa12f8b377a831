"""Care tip service for CRUD operations."""

import logging

from src.core import db_client
from src.core.clock import Clock, utc_now
from src.core.db_client import ObjectStore
from src.core.logging import log_with_plant_context, span
from src.domain.tip import Tip


logger = logging.getLogger(__name__)

COLLECTION = "tips"


async def get_all_tips(*, db: ObjectStore = db_client) -> list[Tip]:
    """List all tips."""
    records = await db.list_records(collection=COLLECTION)
    return [Tip.model_validate(r) for r in records]


async def get_tips_by_plant(*, plant_id: str, db: ObjectStore = db_client) -> list[Tip]:
    """List a plant's tips, newest first."""
    records = await db.list_by_index(collection=COLLECTION, index="plant_id", value=plant_id)
    return sorted((Tip.model_validate(r) for r in records), key=lambda t: t.generated_at, reverse=True)


async def add_tip(*, plant_id: str, content: str, db: ObjectStore = db_client, clock: Clock = utc_now) -> Tip:
    """Store a care tip for a plant."""
    with span("tip_service.add_tip"):
        record = await db.create_record(
            collection=COLLECTION,
            data={"plant_id": plant_id, "content": content, "generated_at": clock().isoformat()},
        )
        log_with_plant_context(logger, "info", "Added tip", plant_id=plant_id)
        return Tip.model_validate(record)


async def update_tip(*, tip: Tip, db: ObjectStore = db_client) -> Tip:
    """Write a tip back in full."""
    data = tip.model_dump(mode="json", exclude={"id"})
    record = await db.put_record(collection=COLLECTION, record_id=tip.id, data=data)
    return Tip.model_validate(record)


async def delete_tip(*, tip_id: str, db: ObjectStore = db_client) -> None:
    """Delete a tip.

    Raises:
        RecordNotFoundError: If the tip does not exist
    """
    await db.delete_record(collection=COLLECTION, record_id=tip_id)
    logger.info("Deleted tip %s", tip_id)
