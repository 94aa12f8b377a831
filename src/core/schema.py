"""Object store schema (code-first approach)."""

import logging

import aiosqlite


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    "rooms",
    "plants",
    "images",
    "tasks",
    "tips",
    "settings",
]

# Secondary indexes per collection, scanned via db_client.list_by_index()
INDEXES: dict[str, list[str]] = {
    "rooms": ["name"],
    "plants": ["room_id", "name", "archived"],
    "images": ["plant_id"],
    "tasks": ["plant_id", "due_date", "done", "parent_task_id"],
    "tips": ["plant_id"],
    "settings": [],
}


async def init_schema(conn: aiosqlite.Connection) -> None:
    """Create collection tables and their JSON expression indexes if missing."""
    for collection in COLLECTIONS:
        await conn.execute(f"CREATE TABLE IF NOT EXISTS {collection} (id TEXT PRIMARY KEY, data TEXT NOT NULL)")
        for field in INDEXES[collection]:
            await conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{collection}_{field} "
                f"ON {collection} (json_extract(data, '$.{field}'))"
            )
    await conn.commit()

    logger.info("Schema initialized", extra={"collections": len(COLLECTIONS)})
