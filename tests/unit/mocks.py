"""Pure Python in-memory object store for unit testing."""

import copy
from typing import Any

from src.core.db_client import DatabaseError, RecordNotFoundError


class InMemoryDBClient:
    """Pure Python in-memory object store for unit testing.

    Mirrors the keyword-only interface of ``src.core.db_client`` without
    touching SQLite. Records come back as deep copies in insertion order.
    """

    def __init__(self):
        """Initialize empty in-memory store."""
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._id_counter = 1000

    def _collection(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def _require(self, collection: str, record_id: str) -> dict[str, Any]:
        if not isinstance(record_id, str):
            raise DatabaseError(f"Record ID must be a string, got {type(record_id)}")

        records = self._collections.get(collection, {})
        if record_id not in records:
            raise RecordNotFoundError(f"Record not found in {collection}: {record_id}")
        return records[record_id]

    async def create_record(self, *, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create a new record with a generated ID.

        Raises:
            DatabaseError: If data is not a dictionary
        """
        if not isinstance(data, dict):
            raise DatabaseError(f"Data must be a dictionary, got {type(data)}")

        record_id = str(self._id_counter)
        self._id_counter += 1

        record = {**copy.deepcopy(data), "id": record_id}
        self._collection(collection)[record_id] = record
        return copy.deepcopy(record)

    async def get_record(self, *, collection: str, record_id: str) -> dict[str, Any]:
        """Get a record by ID.

        Raises:
            RecordNotFoundError: If record not found
        """
        return copy.deepcopy(self._require(collection, record_id))

    async def put_record(self, *, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Insert or replace a whole record."""
        if not isinstance(data, dict):
            raise DatabaseError(f"Data must be a dictionary, got {type(data)}")

        # Replacing an existing key keeps its insertion position
        record = {**copy.deepcopy(data), "id": record_id}
        self._collection(collection)[record_id] = record
        return copy.deepcopy(record)

    async def update_record(self, *, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Merge data into an existing record.

        Raises:
            ValueError: If data is empty
            RecordNotFoundError: If record not found
        """
        if not data:
            raise ValueError("Empty update payload")

        record = self._require(collection, record_id)
        record.update(copy.deepcopy(data))
        return copy.deepcopy(record)

    async def delete_record(self, *, collection: str, record_id: str) -> None:
        """Delete a record.

        Raises:
            RecordNotFoundError: If record not found
        """
        self._require(collection, record_id)
        del self._collections[collection][record_id]

    async def list_records(self, *, collection: str) -> list[dict[str, Any]]:
        """List every record of a collection in insertion order."""
        return [copy.deepcopy(r) for r in self._collections.get(collection, {}).values()]

    async def list_by_index(
        self,
        *,
        collection: str,
        index: str,
        value: str | int | float | bool | None,
    ) -> list[dict[str, Any]]:
        """List records whose field equals value."""
        return [copy.deepcopy(r) for r in self._collections.get(collection, {}).values() if r.get(index) == value]
