"""App settings stored as a single record under a fixed key."""

import logging

from src.core import db_client
from src.core.config import constants
from src.core.db_client import ObjectStore, RecordNotFoundError
from src.domain.tip import AppSettings


logger = logging.getLogger(__name__)

COLLECTION = "settings"


async def get_settings(*, db: ObjectStore = db_client) -> AppSettings | None:
    """Return the stored app settings, or None if nothing was saved yet."""
    try:
        record = await db.get_record(collection=COLLECTION, record_id=constants.APP_SETTINGS_KEY)
    except RecordNotFoundError:
        return None
    return AppSettings.model_validate(record)


async def save_settings(*, app_settings: AppSettings, db: ObjectStore = db_client) -> AppSettings:
    """Store the app settings, replacing any previous ones."""
    record = await db.put_record(
        collection=COLLECTION,
        record_id=constants.APP_SETTINGS_KEY,
        data=app_settings.model_dump(mode="json"),
    )
    logger.info("Saved app settings")
    return AppSettings.model_validate(record)


async def clear_settings(*, db: ObjectStore = db_client) -> None:
    """Remove the stored app settings; clearing twice is a no-op."""
    try:
        await db.delete_record(collection=COLLECTION, record_id=constants.APP_SETTINGS_KEY)
    except RecordNotFoundError:
        logger.debug("No app settings to clear")
        return
    logger.info("Cleared app settings")
