"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  PromoterPro - Entity Store                                                  ║
║                                                                              ║
║  Five keyed collections (promoters, floors, sales, complaints, feedbacks)    ║
║  plus a single-element settings collection.                                  ║
║                                                                              ║
║  RÈGLES:                                                                     ║
║  - Every mutation reads the FULL collection, mutates the list and writes     ║
║    the FULL collection back (no partial updates, no append log)              ║
║  - First read of an absent collection seeds the defaults and writes them     ║
║  - update/delete on an unknown id is a silent no-op                          ║
║  - A write refused by the medium raises StorageFullError, state unchanged    ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import copy
import errno
import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import DocumentTooLarge, WriteError

import config
from config import now_iso
from services.errors import DuplicateRecordError, StorageFullError

logger = logging.getLogger("repository")


class Collection(str, Enum):
    PROMOTERS = "promoters"
    FLOORS = "floors"
    SALES = "sales"
    COMPLAINTS = "complaints"
    FEEDBACKS = "feedbacks"
    SETTINGS = "settings"


STORAGE_KEYS = {c: f"pp_{c.value}" for c in Collection}


# ════════════════════════════════════════════════════════════════════════════
# DEFAULT SEED DATA
# ════════════════════════════════════════════════════════════════════════════

INITIAL_PROMOTERS = [
    {"id": "p1", "name": "Alice Johnson", "assignedFloors": ["Ground Floor - Main Entrance"]},
    {"id": "p2", "name": "Bob Smith", "assignedFloors": ["1st Floor - Food Court"]},
]

INITIAL_FLOORS = [
    {"id": "f1", "name": "Ground Floor - Main Entrance"},
    {"id": "f2", "name": "1st Floor - Food Court"},
    {"id": "f3", "name": "2nd Floor - Arcade Zone"},
]

DEFAULT_SEEDS: Dict[Collection, List[Dict[str, Any]]] = {
    Collection.PROMOTERS: INITIAL_PROMOTERS,
    Collection.FLOORS: INITIAL_FLOORS,
    Collection.SETTINGS: [{}],
}


CollectionName = Union[Collection, str]


class BaseRepository:
    """
    Store contract shared by every medium.

    Subclasses only implement raw access to one key:
      _read(key)  -> decoded value, or None when the key is absent
                     (raise ValueError when the stored value cannot be decoded;
                     a decoded value that is not a list also means defaults)
      _write(key, items) -> persist the whole list (raise StorageFullError
                     when the medium refuses it)
    """

    async def init(self):
        """Prepare the medium"""
        pass

    async def close(self):
        """Release the medium"""
        pass

    async def _read(self, key: str) -> Optional[List[Dict[str, Any]]]:
        raise NotImplementedError

    async def _write(self, key: str, items: List[Dict[str, Any]]) -> None:
        raise NotImplementedError

    # ---- Collection access ----

    async def _load(self, collection: Collection) -> List[Dict[str, Any]]:
        key = STORAGE_KEYS[collection]
        defaults = DEFAULT_SEEDS.get(collection, [])

        try:
            items = await self._read(key)
        except ValueError as e:
            logger.warning(f"[STORE] Unreadable value for {key}, using defaults: {e}")
            return copy.deepcopy(defaults)

        if items is None:
            seeded = copy.deepcopy(defaults)
            if seeded:
                await self._write(key, seeded)
                logger.info(f"[STORE] Seeded {key} with {len(seeded)} default records")
            return seeded

        if not isinstance(items, list):
            logger.warning(f"[STORE] Value for {key} is not a list, using defaults")
            return copy.deepcopy(defaults)

        return items

    async def list(self, collection: CollectionName) -> List[Dict[str, Any]]:
        """Full collection in insertion order"""
        return await self._load(Collection(collection))

    async def get(self, collection: CollectionName, record_id: str) -> Optional[Dict[str, Any]]:
        items = await self._load(Collection(collection))
        return next((r for r in items if r.get("id") == record_id), None)

    async def add(self, collection: CollectionName, record: Dict[str, Any]) -> Dict[str, Any]:
        collection = Collection(collection)
        items = await self._load(collection)

        if any(r.get("id") == record.get("id") for r in items):
            raise DuplicateRecordError(
                f"{collection.value}: id '{record.get('id')}' already exists"
            )

        items.append(record)
        await self._write(STORAGE_KEYS[collection], items)
        return record

    async def update(self, collection: CollectionName, record: Dict[str, Any]) -> bool:
        """Replace the record with the same id. Returns False (no write) if absent."""
        collection = Collection(collection)
        items = await self._load(collection)

        idx = next((i for i, r in enumerate(items) if r.get("id") == record.get("id")), -1)
        if idx == -1:
            return False

        items[idx] = record
        await self._write(STORAGE_KEYS[collection], items)
        return True

    async def delete(self, collection: CollectionName, record_id: str) -> bool:
        """Remove the record with this id. Returns False (no write) if absent."""
        collection = Collection(collection)
        items = await self._load(collection)

        remaining = [r for r in items if r.get("id") != record_id]
        if len(remaining) == len(items):
            return False

        await self._write(STORAGE_KEYS[collection], remaining)
        return True

    async def replace(self, collection: CollectionName, items: List[Dict[str, Any]]) -> None:
        """Overwrite the whole collection verbatim"""
        collection = Collection(collection)
        await self._write(STORAGE_KEYS[collection], list(items))


# ════════════════════════════════════════════════════════════════════════════
# IN-MEMORY (tests, demo)
# ════════════════════════════════════════════════════════════════════════════

class InMemoryRepository(BaseRepository):
    """
    Values are kept as JSON text, like a browser key-value store, so callers
    never share mutable state with the store and the quota is measured in bytes.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._values: Dict[str, str] = {}

    def _used_bytes(self, exclude_key: str) -> int:
        return sum(
            len(k.encode()) + len(v.encode())
            for k, v in self._values.items()
            if k != exclude_key
        )

    async def _read(self, key: str) -> Optional[List[Dict[str, Any]]]:
        raw = self._values.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def _write(self, key: str, items: List[Dict[str, Any]]) -> None:
        payload = json.dumps(items, separators=(",", ":"))

        if self.quota_bytes is not None:
            used = self._used_bytes(key) + len(key.encode()) + len(payload.encode())
            if used > self.quota_bytes:
                raise StorageFullError(key, f"{used} bytes exceeds quota of {self.quota_bytes}")

        self._values[key] = payload


# ════════════════════════════════════════════════════════════════════════════
# JSON FILES (one file per collection)
# ════════════════════════════════════════════════════════════════════════════

class JsonFileRepository(BaseRepository):
    """Each collection lives in <data_dir>/<storage key>.json"""

    def __init__(self, data_dir: Union[str, Path], quota_bytes: Optional[int] = None):
        self.data_dir = Path(data_dir)
        self.quota_bytes = quota_bytes

    async def init(self):
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def _used_bytes(self, exclude_key: str) -> int:
        if not self.data_dir.exists():
            return 0
        return sum(
            p.stat().st_size
            for p in self.data_dir.glob("*.json")
            if p.name != f"{exclude_key}.json"
        )

    async def _read(self, key: str) -> Optional[List[Dict[str, Any]]]:
        path = self._path(key)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    async def _write(self, key: str, items: List[Dict[str, Any]]) -> None:
        payload = json.dumps(items, ensure_ascii=False)

        if self.quota_bytes is not None:
            used = self._used_bytes(key) + len(payload.encode("utf-8"))
            if used > self.quota_bytes:
                raise StorageFullError(key, f"{used} bytes exceeds quota of {self.quota_bytes}")

        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")

        # Write to a temp file first so a failed write never truncates the old value
        try:
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            if e.errno in (errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)):
                raise StorageFullError(key, str(e)) from e
            raise


# ════════════════════════════════════════════════════════════════════════════
# MONGODB (one document per collection)
# ════════════════════════════════════════════════════════════════════════════

# BSONObjectTooLarge
MONGO_STORAGE_FULL_CODES = {10334}


class MongoRepository(BaseRepository):
    """
    Documents in the `collections` collection:
      {"key": "pp_sales", "items": [...], "updated_at": "..."}
    """

    def __init__(self, mongo_url: str = None, db_name: str = None, database=None):
        self._client = None
        if database is None:
            self._client = AsyncIOMotorClient(mongo_url or config.MONGO_URL)
            database = self._client[db_name or config.DB_NAME]
        self.db = database

    async def init(self):
        await self.db.collections.create_index("key", unique=True)

    async def close(self):
        if self._client:
            self._client.close()

    async def _read(self, key: str) -> Optional[List[Dict[str, Any]]]:
        doc = await self.db.collections.find_one({"key": key}, {"_id": 0})
        if not doc:
            return None
        if "items" not in doc:
            raise ValueError(f"{key}: document has no 'items'")
        return doc["items"]

    async def _write(self, key: str, items: List[Dict[str, Any]]) -> None:
        try:
            await self.db.collections.update_one(
                {"key": key},
                {"$set": {"items": items, "updated_at": now_iso()}},
                upsert=True
            )
        except DocumentTooLarge as e:
            raise StorageFullError(key, str(e)) from e
        except WriteError as e:
            if e.code in MONGO_STORAGE_FULL_CODES:
                raise StorageFullError(key, str(e)) from e
            raise


def build_repository() -> BaseRepository:
    """Repository selected by STORAGE_BACKEND"""
    backend = config.STORAGE_BACKEND

    if backend == "memory":
        return InMemoryRepository(quota_bytes=config.STORAGE_QUOTA_BYTES)
    if backend == "file":
        return JsonFileRepository(config.DATA_DIR, quota_bytes=config.STORAGE_QUOTA_BYTES)
    if backend == "mongo":
        return MongoRepository(config.MONGO_URL, config.DB_NAME)

    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")
