"""
expensebot/db/kvstore.py

Purpose: Flat key-value backends for the record store

- KVBackend: get / set / delete of one JSON object per key
- MongoKVBackend: one document per key in a single collection
- MemoryKVBackend: process-local dict (tests, local development)

Backends raise StorageError; "absent" is returned as None.
"""

import copy
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from expensebot.core.exceptions import StorageError
from expensebot.core.logging import get_logger

logger = get_logger(__name__)


class KVBackend:
    """Interface shared by all backends."""

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def set(self, key: str, value: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def ping(self) -> bool:
        return True


class MongoKVBackend(KVBackend):
    """
    Stores each key as `{_id: key, value: {...}, updated_at: ...}`.
    Writes are plain upserts: no versioning, last write wins.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            document = await self._collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"failed to get {key}: {e}") from e

        if not document:
            return None
        return document.get("value")

    async def set(self, key: str, value: Dict[str, Any]) -> None:
        try:
            await self._collection.replace_one(
                {"_id": key},
                {"_id": key, "value": value, "updated_at": datetime.now(timezone.utc)},
                upsert=True,
            )
        except PyMongoError as e:
            raise StorageError(f"failed to store {key}: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._collection.delete_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"failed to delete {key}: {e}") from e

    async def ping(self) -> bool:
        try:
            await self._collection.database.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"Record store ping failed: {e}")
            return False


class MemoryKVBackend(KVBackend):
    """Keeps deep copies so callers never share mutable state with the store."""

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: Dict[str, Any]) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return sorted(self._data)
