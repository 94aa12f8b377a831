"""SQLite-backed key-value object store with per-collection secondary indexes.

Every collection is a table of ``(id, data)`` rows where ``data`` holds the
record as a JSON document. Secondary indexes are SQLite expression indexes on
``json_extract(data, '$.<field>')`` and are declared in ``src.core.schema``.
"""

import asyncio
import json
import logging
import re
import threading
import uuid
from pathlib import Path
from typing import Any, Protocol

import aiosqlite

from src.core.config import settings


logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Raised when the underlying store fails."""


class RecordNotFoundError(KeyError):
    """Raised when a record does not exist in a collection."""


_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def _validate_collection_name(collection: str) -> None:
    """Validate that a collection name contains only alphanumeric characters and underscores."""
    if not _NAME_PATTERN.match(collection):
        msg = f"Invalid collection name: {collection}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def _validate_field_name(field: str) -> None:
    """Validate an indexed field name before it is embedded in a JSON path."""
    if not _NAME_PATTERN.match(field):
        msg = f"Invalid index field: {field}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def _encode(record: dict[str, Any]) -> str:
    return json.dumps(record, ensure_ascii=False, default=str)


def _decode(raw: str) -> dict[str, Any]:
    return json.loads(raw)


def _index_param(value: str | int | float | bool | None) -> str | int | float | None:
    """Convert a lookup value to what json_extract() yields for it."""
    if isinstance(value, bool):
        return int(value)
    return value


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


_db_connections: dict[tuple[int, int, str], aiosqlite.Connection] = {}
_db_lock = asyncio.Lock()


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Get or create a cached connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop = asyncio.get_running_loop()
    loop_id = id(loop)
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    if cache_key in _db_connections:
        return _db_connections[cache_key]

    async with _db_lock:
        # Double-check after acquiring lock
        if cache_key in _db_connections:
            return _db_connections[cache_key]

        path.parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(str(path))
        await conn.execute("PRAGMA journal_mode = WAL")

        _db_connections[cache_key] = conn

        logger.info(
            "Created new SQLite connection",
            extra={"db_path": str(path), "thread_id": thread_id, "loop_id": loop_id},
        )
        return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop_id = id(asyncio.get_running_loop())
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    async with _db_lock:
        conn = _db_connections.pop(cache_key, None)
        if conn is None:
            return
        await conn.close()
        logger.info("Closed SQLite connection", extra={"db_path": str(path)})


async def init_db(*, db_path: str | None = None) -> None:
    """Create every collection table and index declared in the schema."""
    from src.core.schema import init_schema  # noqa: PLC0415 - schema imports this module

    conn = await get_connection(db_path=db_path)
    await init_schema(conn)


async def create_record(*, collection: str, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a new record under a fresh UUID and return it including its id."""
    _validate_collection_name(collection)
    record = {**data, "id": str(uuid.uuid4())}
    try:
        conn = await get_connection()
        query = f"INSERT INTO {collection} (id, data) VALUES (?, ?)"  # noqa: S608 - collection is validated
        await conn.execute(query, (record["id"], _encode(record)))
        await conn.commit()
    except aiosqlite.Error as e:
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to create record in {collection}: {e}"
        raise DatabaseError(msg) from e

    logger.info("Created record", extra={"collection": collection, "record_id": record["id"]})
    return record


async def get_record(*, collection: str, record_id: str) -> dict[str, Any]:
    """Fetch a single record by ID, raising RecordNotFoundError if it does not exist."""
    _validate_collection_name(collection)
    try:
        conn = await get_connection()
        query = f"SELECT data FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (record_id,))
        row = await cursor.fetchone()
    except aiosqlite.Error as e:
        logger.error("get_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to get record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if row is None:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    return _decode(row[0])


async def put_record(*, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Insert or replace the whole record stored under ``record_id``."""
    _validate_collection_name(collection)
    record = {**data, "id": record_id}
    try:
        conn = await get_connection()
        query = f"INSERT OR REPLACE INTO {collection} (id, data) VALUES (?, ?)"  # noqa: S608 - collection is validated
        await conn.execute(query, (record_id, _encode(record)))
        await conn.commit()
    except aiosqlite.Error as e:
        logger.error("put_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to put record in {collection}: {e}"
        raise DatabaseError(msg) from e

    logger.info("Stored record", extra={"collection": collection, "record_id": record_id})
    return record


async def update_record(*, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Merge ``data`` into an existing record and return the result."""
    if not data:
        msg = "Empty update payload"
        raise ValueError(msg)

    existing = await get_record(collection=collection, record_id=record_id)
    return await put_record(collection=collection, record_id=record_id, data={**existing, **data})


async def delete_record(*, collection: str, record_id: str) -> None:
    """Delete a record by ID, raising RecordNotFoundError if it does not exist."""
    _validate_collection_name(collection)
    try:
        conn = await get_connection()
        query = f"DELETE FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (record_id,))
        await conn.commit()
    except aiosqlite.Error as e:
        logger.error("delete_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to delete record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if cursor.rowcount == 0:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    logger.info("Deleted record", extra={"collection": collection, "record_id": record_id})


async def list_records(*, collection: str) -> list[dict[str, Any]]:
    """Return every record in a collection in insertion order."""
    _validate_collection_name(collection)
    try:
        conn = await get_connection()
        query = f"SELECT data FROM {collection} ORDER BY rowid"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query)
        rows = await cursor.fetchall()
    except aiosqlite.Error as e:
        logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to list records from {collection}: {e}"
        raise DatabaseError(msg) from e

    records = [_decode(row[0]) for row in rows]
    logger.debug("Listed records", extra={"collection": collection, "count": len(records)})
    return records


async def list_by_index(
    *,
    collection: str,
    index: str,
    value: str | int | float | bool | None,
) -> list[dict[str, Any]]:
    """Return every record whose indexed field equals ``value``."""
    _validate_collection_name(collection)
    _validate_field_name(index)
    try:
        conn = await get_connection()
        query = (
            f"SELECT data FROM {collection} "  # noqa: S608 - collection and index are validated
            f"WHERE json_extract(data, '$.{index}') = ? ORDER BY rowid"
        )
        cursor = await conn.execute(query, (_index_param(value),))
        rows = await cursor.fetchall()
    except aiosqlite.Error as e:
        logger.error("list_by_index_failed", extra={"collection": collection, "index": index, "error": str(e)})
        msg = f"Failed to scan index {index} of {collection}: {e}"
        raise DatabaseError(msg) from e

    records = [_decode(row[0]) for row in rows]
    logger.debug("Scanned index", extra={"collection": collection, "index": index, "count": len(records)})
    return records


class ObjectStore(Protocol):
    """Operations the services need from a store.

    This module satisfies the protocol itself; tests pass an in-memory double.
    """

    async def create_record(self, *, collection: str, data: dict[str, Any]) -> dict[str, Any]: ...

    async def get_record(self, *, collection: str, record_id: str) -> dict[str, Any]: ...

    async def put_record(self, *, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]: ...

    async def update_record(self, *, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]: ...

    async def delete_record(self, *, collection: str, record_id: str) -> None: ...

    async def list_records(self, *, collection: str) -> list[dict[str, Any]]: ...

    async def list_by_index(
        self,
        *,
        collection: str,
        index: str,
        value: str | int | float | bool | None,
    ) -> list[dict[str, Any]]: ...
