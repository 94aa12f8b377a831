"""Plant image service for CRUD operations."""

import logging

from src.core import db_client
from src.core.clock import Clock, utc_now
from src.core.db_client import ObjectStore
from src.core.logging import log_with_plant_context, span
from src.domain.plant import PlantImage


logger = logging.getLogger(__name__)

COLLECTION = "images"


async def get_all_images(*, db: ObjectStore = db_client) -> list[PlantImage]:
    """List all images."""
    records = await db.list_records(collection=COLLECTION)
    return [PlantImage.model_validate(r) for r in records]


async def get_images_by_plant(*, plant_id: str, db: ObjectStore = db_client) -> list[PlantImage]:
    """List a plant's images, newest first."""
    records = await db.list_by_index(collection=COLLECTION, index="plant_id", value=plant_id)
    return sorted((PlantImage.model_validate(r) for r in records), key=lambda i: i.timestamp, reverse=True)


async def add_image(
    *,
    plant_id: str,
    data_url: str,
    db: ObjectStore = db_client,
    clock: Clock = utc_now,
) -> PlantImage:
    """Store a new photo of a plant."""
    with span("image_service.add_image"):
        record = await db.create_record(
            collection=COLLECTION,
            data={"plant_id": plant_id, "timestamp": clock().isoformat(), "data_url": data_url},
        )
        log_with_plant_context(logger, "info", "Added image", plant_id=plant_id)
        return PlantImage.model_validate(record)


async def update_image(*, image: PlantImage, db: ObjectStore = db_client) -> PlantImage:
    """Write an image back in full."""
    data = image.model_dump(mode="json", exclude={"id"})
    record = await db.put_record(collection=COLLECTION, record_id=image.id, data=data)
    return PlantImage.model_validate(record)


async def delete_image(*, image_id: str, db: ObjectStore = db_client) -> None:
    """Delete an image.

    Raises:
        RecordNotFoundError: If the image does not exist
    """
    await db.delete_record(collection=COLLECTION, record_id=image_id)
    logger.info("Deleted image %s", image_id)
