import asyncio
import json
import logging
from collections import defaultdict
from collections.abc import Callable
from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Any

from floorplan.config import settings

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Collection = list[Record]
Mutator = Callable[[Record], Record]


class StagingKey(StrEnum):
    ASSET_TYPES = "asset-types"
    ASSETS = "assets"
    FLOORS = "floors"
    RESOURCES = "resources"


def _index_of(collection: Collection | None, item_id: str) -> int | None:
    if not collection:
        return None
    for index, record in enumerate(collection):
        if isinstance(record, dict) and record.get("id") == item_id:
            return index
    return None


class StagingStore:
    """File-backed JSON collections, one ``<key>.json`` document per key.

    Every write is a read-modify-write of the whole document, serialized per
    key with an asyncio lock and persisted through a temp file rename. File
    I/O runs in a worker thread. Reads of a missing or corrupt document
    return None; failed writes are logged and reported as False. Nothing
    here raises to the caller.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def _load(self, key: str) -> Collection | None:
        path = self.path_for(key)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            logger.warning("Unreadable staged collection %s, treating as absent", path, exc_info=True)
            return None
        if not isinstance(data, list):
            logger.warning("Staged collection %s is not a list, treating as absent", path)
            return None
        return data

    def _save(self, key: str, collection: Collection) -> bool:
        path = self.path_for(key)
        tmp = path.with_name(f"{path.name}.tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(collection, indent=2), encoding="utf-8")
            tmp.replace(path)
        except (OSError, TypeError, ValueError):
            logger.exception("Could not write staged collection %s", key)
            return False
        return True

    async def read(self, key: str) -> Collection | None:
        return await asyncio.to_thread(self._load, key)

    async def write_all(self, key: str, collection: Collection) -> bool:
        async with self._locks[key]:
            return await asyncio.to_thread(self._save, key, list(collection))

    async def mutate(self, key: str, change: Callable[[Collection | None], Collection | None]) -> bool:
        """Apply ``change`` to the staged collection while holding the key lock.

        ``change`` gets the current collection (None when absent) and returns
        the collection to persist, or None to leave the document untouched.
        """
        async with self._locks[key]:
            try:
                updated = change(await asyncio.to_thread(self._load, key))
            except Exception:
                logger.exception("Staged mutation of %s failed", key)
                return False
            if updated is None:
                return False
            return await asyncio.to_thread(self._save, key, updated)

    async def update_item(self, key: str, item_id: str, mutator: Mutator) -> bool:
        def change(collection: Collection | None) -> Collection | None:
            index = _index_of(collection, item_id)
            if index is None:
                return None
            collection[index] = mutator(collection[index])
            return collection

        return await self.mutate(key, change)

    async def append_item(self, key: str, item: Record, *, create_missing: bool = True) -> bool:
        """Prepend ``item``; an absent collection is started unless ``create_missing`` is off."""

        def change(collection: Collection | None) -> Collection | None:
            if collection is None:
                if not create_missing:
                    return None
                collection = []
            collection.insert(0, item)
            return collection

        return await self.mutate(key, change)

    async def remove_item(self, key: str, item_id: str) -> bool:
        def change(collection: Collection | None) -> Collection | None:
            if _index_of(collection, item_id) is None:
                return None
            return [record for record in collection if record.get("id") != item_id]

        return await self.mutate(key, change)

    async def update_floor(self, floor_id: str, mutator: Mutator) -> bool:
        return await self.update_item(StagingKey.FLOORS, floor_id, mutator)

    async def _change_floor_items(
        self, floor_id: str, change_items: Callable[[Collection], Collection | None]
    ) -> bool:
        def change(floors: Collection | None) -> Collection | None:
            index = _index_of(floors, floor_id)
            if index is None:
                return None
            floor = floors[index]
            items = floor.get("items")
            updated = change_items(list(items) if isinstance(items, list) else [])
            if updated is None:
                return None
            floor["items"] = updated
            return floors

        return await self.mutate(StagingKey.FLOORS, change)

    async def update_floor_item(self, floor_id: str, item_id: str, mutator: Mutator) -> bool:
        def change(items: Collection) -> Collection | None:
            index = _index_of(items, item_id)
            if index is None:
                return None
            items[index] = mutator(items[index])
            return items

        return await self._change_floor_items(floor_id, change)

    async def append_floor_item(self, floor_id: str, item: Record) -> bool:
        return await self._change_floor_items(floor_id, lambda items: [*items, item])

    async def remove_floor_item(self, floor_id: str, item_id: str) -> bool:
        def change(items: Collection) -> Collection | None:
            if _index_of(items, item_id) is None:
                return None
            return [record for record in items if record.get("id") != item_id]

        return await self._change_floor_items(floor_id, change)

    async def invalidate(self, key: str) -> bool:
        """Drop the staged copy so the next read goes to the durable store."""
        async with self._locks[key]:
            try:
                await asyncio.to_thread(self.path_for(key).unlink, missing_ok=True)
            except OSError:
                logger.exception("Could not invalidate staged collection %s", key)
                return False
        logger.info("Invalidated staged collection %s", key)
        return True


@lru_cache
def get_staging_store() -> StagingStore:
    return StagingStore(settings.staging_dir)
