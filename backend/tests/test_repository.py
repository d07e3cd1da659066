"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  PromoterPro - Store Tests                                                   ║
║                                                                              ║
║  1. Seeding au premier accès (écrit en retour)                               ║
║  2. add / update / delete, no-op sur id inconnu                              ║
║  3. Quota dépassé = StorageFullError, état inchangé                          ║
║  4. Valeur illisible = defaults sans écriture                                ║
║  5. JsonFileRepository sur disque                                            ║
║  6. MongoRepository sur une base factice                                     ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import copy
import json

import pytest
from pymongo.errors import DocumentTooLarge, WriteError

from services.errors import DuplicateRecordError, StorageFullError
from services.repository import (
    Collection,
    INITIAL_FLOORS,
    INITIAL_PROMOTERS,
    JsonFileRepository,
    MongoRepository,
    STORAGE_KEYS,
)
from services.settings import get_logo
from tests.factories import make_sale


class TestSeeding:

    @pytest.mark.asyncio
    async def test_promoters_seeded_and_written_back(self, repo):
        promoters = await repo.list(Collection.PROMOTERS)
        assert [p["id"] for p in promoters] == ["p1", "p2"]
        assert promoters[0]["assignedFloors"] == ["Ground Floor - Main Entrance"]
        assert STORAGE_KEYS[Collection.PROMOTERS] in repo._values

    @pytest.mark.asyncio
    async def test_floors_seeded(self, repo):
        floors = await repo.list(Collection.FLOORS)
        assert floors == INITIAL_FLOORS
        assert floors[2]["name"] == "2nd Floor - Arcade Zone"

    @pytest.mark.asyncio
    async def test_settings_seeded_with_one_empty_record(self, repo):
        assert await repo.list(Collection.SETTINGS) == [{}]

    @pytest.mark.asyncio
    async def test_sales_start_empty_and_are_not_written(self, repo):
        assert await repo.list(Collection.SALES) == []
        assert "pp_sales" not in repo._values

    @pytest.mark.asyncio
    async def test_seed_is_a_copy(self, repo):
        """Mutating a returned list never touches the seed constants"""
        promoters = await repo.list(Collection.PROMOTERS)
        promoters[0]["name"] = "Changed"
        assert INITIAL_PROMOTERS[0]["name"] == "Alice Johnson"

    @pytest.mark.asyncio
    async def test_unreadable_value_returns_defaults_without_writing(self, repo):
        repo._values["pp_floors"] = "{not json"
        floors = await repo.list(Collection.FLOORS)
        assert floors == INITIAL_FLOORS
        assert repo._values["pp_floors"] == "{not json"

    @pytest.mark.asyncio
    async def test_non_list_value_returns_defaults_without_writing(self, repo):
        repo._values["pp_settings"] = '{"logoUrl":"x"}'
        assert await repo.list(Collection.SETTINGS) == [{}]
        assert await get_logo(repo) is None
        assert repo._values["pp_settings"] == '{"logoUrl":"x"}'


class TestMutations:

    @pytest.mark.asyncio
    async def test_add_appends_in_order(self, repo):
        await repo.add(Collection.SALES, make_sale("s1"))
        await repo.add(Collection.SALES, make_sale("s2"))
        assert [s["id"] for s in await repo.list(Collection.SALES)] == ["s1", "s2"]

    @pytest.mark.asyncio
    async def test_add_duplicate_id_rejected(self, repo):
        await repo.add(Collection.SALES, make_sale("s1"))
        with pytest.raises(DuplicateRecordError):
            await repo.add(Collection.SALES, make_sale("s1"))
        assert len(await repo.list(Collection.SALES)) == 1

    @pytest.mark.asyncio
    async def test_update_replaces_record(self, repo):
        await repo.add(Collection.SALES, make_sale("s1"))
        assert await repo.update(Collection.SALES, make_sale("s1", status="Verified")) is True
        assert (await repo.get(Collection.SALES, "s1"))["status"] == "Verified"

    @pytest.mark.asyncio
    async def test_update_unknown_id_is_noop(self, repo):
        await repo.add(Collection.SALES, make_sale("s1"))
        before = dict(repo._values)
        assert await repo.update(Collection.SALES, make_sale("ghost")) is False
        assert repo._values == before

    @pytest.mark.asyncio
    async def test_delete_and_delete_unknown(self, repo):
        await repo.list(Collection.FLOORS)
        assert await repo.delete(Collection.FLOORS, "f2") is True
        assert [f["id"] for f in await repo.list(Collection.FLOORS)] == ["f1", "f3"]
        assert await repo.delete(Collection.FLOORS, "f2") is False

    @pytest.mark.asyncio
    async def test_returned_records_are_detached(self, repo):
        await repo.add(Collection.SALES, make_sale("s1"))
        sale = await repo.get(Collection.SALES, "s1")
        sale["status"] = "Verified"
        assert (await repo.get(Collection.SALES, "s1"))["status"] == "Pending"

    @pytest.mark.asyncio
    async def test_replace_overwrites_verbatim(self, repo):
        await repo.replace(Collection.PROMOTERS, [])
        assert await repo.list(Collection.PROMOTERS) == []


class TestQuota:

    @pytest.mark.asyncio
    async def test_write_over_quota_raises_and_keeps_state(self, tiny_repo):
        await tiny_repo.add(Collection.SALES, make_sale("s1"))
        before = await tiny_repo.list(Collection.SALES)

        huge = make_sale("s2", comment="x" * 4096)
        with pytest.raises(StorageFullError) as exc:
            await tiny_repo.add(Collection.SALES, huge)

        assert exc.value.key == "pp_sales"
        assert await tiny_repo.list(Collection.SALES) == before
        print("✅ Quota exceeded, pp_sales unchanged")

    @pytest.mark.asyncio
    async def test_no_quota_accepts_large_values(self, repo):
        await repo.add(Collection.SALES, make_sale("s1", comment="x" * 100_000))
        assert len(await repo.list(Collection.SALES)) == 1


class TestJsonFileRepository:

    @pytest.mark.asyncio
    async def test_one_file_per_collection(self, tmp_path):
        store = JsonFileRepository(tmp_path)
        await store.init()
        await store.add(Collection.SALES, make_sale("s1"))

        data = json.loads((tmp_path / "pp_sales.json").read_text(encoding="utf-8"))
        assert [s["id"] for s in data] == ["s1"]

    @pytest.mark.asyncio
    async def test_survives_a_new_instance(self, tmp_path):
        first = JsonFileRepository(tmp_path)
        await first.add(Collection.FLOORS, {"id": "f9", "name": "Roof"})

        second = JsonFileRepository(tmp_path)
        floors = await second.list(Collection.FLOORS)
        assert floors[-1] == {"id": "f9", "name": "Roof"}
        assert len(floors) == 4

    @pytest.mark.asyncio
    async def test_quota_leaves_file_untouched(self, tmp_path):
        store = JsonFileRepository(tmp_path, quota_bytes=1024)
        await store.add(Collection.SALES, make_sale("s1"))
        before = (tmp_path / "pp_sales.json").read_text(encoding="utf-8")

        with pytest.raises(StorageFullError):
            await store.add(Collection.SALES, make_sale("s2", comment="y" * 2048))

        assert (tmp_path / "pp_sales.json").read_text(encoding="utf-8") == before
        assert not (tmp_path / "pp_sales.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_corrupt_file_gives_defaults(self, tmp_path):
        (tmp_path / "pp_promoters.json").write_text("oops", encoding="utf-8")
        store = JsonFileRepository(tmp_path)
        promoters = await store.list(Collection.PROMOTERS)
        assert [p["id"] for p in promoters] == ["p1", "p2"]
        assert (tmp_path / "pp_promoters.json").read_text(encoding="utf-8") == "oops"

    @pytest.mark.asyncio
    async def test_object_file_treated_as_empty(self, tmp_path):
        (tmp_path / "pp_sales.json").write_text("{}", encoding="utf-8")
        store = JsonFileRepository(tmp_path)

        assert await store.list(Collection.SALES) == []
        await store.add(Collection.SALES, make_sale("s1"))

        data = json.loads((tmp_path / "pp_sales.json").read_text(encoding="utf-8"))
        assert [s["id"] for s in data] == ["s1"]


# ==================== MONGO (base factice, sans serveur) ====================

class FakeMongoCollection:
    """Async subset of a motor collection used by MongoRepository"""

    def __init__(self):
        self.docs = {}
        self.indexes = []
        self.fail_with = None

    async def create_index(self, field, unique=False):
        self.indexes.append((field, unique))

    async def find_one(self, query, projection=None):
        doc = self.docs.get(query["key"])
        return copy.deepcopy(doc) if doc else None

    async def update_one(self, query, update, upsert=False):
        if self.fail_with:
            raise self.fail_with
        doc = self.docs.setdefault(query["key"], {"key": query["key"]})
        doc.update(copy.deepcopy(update["$set"]))


class FakeMongoDatabase:
    def __init__(self):
        self.collections = FakeMongoCollection()


@pytest.fixture
def mongo_db():
    return FakeMongoDatabase()


class TestMongoRepository:

    @pytest.mark.asyncio
    async def test_init_creates_unique_key_index(self, mongo_db):
        await MongoRepository(database=mongo_db).init()
        assert mongo_db.collections.indexes == [("key", True)]

    @pytest.mark.asyncio
    async def test_one_document_per_key(self, mongo_db):
        store = MongoRepository(database=mongo_db)
        await store.add(Collection.SALES, make_sale("s1"))
        await store.add(Collection.SALES, make_sale("s2"))

        doc = mongo_db.collections.docs["pp_sales"]
        assert [s["id"] for s in doc["items"]] == ["s1", "s2"]
        assert "updated_at" in doc
        assert [s["id"] for s in await store.list(Collection.SALES)] == ["s1", "s2"]

    @pytest.mark.asyncio
    async def test_seeding_writes_document(self, mongo_db):
        store = MongoRepository(database=mongo_db)
        assert await store.list(Collection.FLOORS) == INITIAL_FLOORS
        assert mongo_db.collections.docs["pp_floors"]["items"] == INITIAL_FLOORS

    @pytest.mark.asyncio
    async def test_non_list_items_returns_defaults_without_writing(self, mongo_db):
        mongo_db.collections.docs["pp_promoters"] = {"key": "pp_promoters", "items": {"oops": 1}}
        store = MongoRepository(database=mongo_db)

        promoters = await store.list(Collection.PROMOTERS)

        assert [p["id"] for p in promoters] == ["p1", "p2"]
        assert mongo_db.collections.docs["pp_promoters"]["items"] == {"oops": 1}

    @pytest.mark.asyncio
    async def test_document_too_large_is_storage_full(self, mongo_db):
        store = MongoRepository(database=mongo_db)
        await store.add(Collection.SALES, make_sale("s1"))

        mongo_db.collections.fail_with = DocumentTooLarge("BSON document too large")
        with pytest.raises(StorageFullError) as exc:
            await store.add(Collection.SALES, make_sale("s2"))

        assert exc.value.key == "pp_sales"
        assert [s["id"] for s in mongo_db.collections.docs["pp_sales"]["items"]] == ["s1"]

    @pytest.mark.asyncio
    async def test_bson_size_write_error_is_storage_full(self, mongo_db):
        store = MongoRepository(database=mongo_db)
        mongo_db.collections.fail_with = WriteError("object to insert too large", code=10334)
        with pytest.raises(StorageFullError):
            await store.add(Collection.SALES, make_sale("s1"))

    @pytest.mark.asyncio
    async def test_other_write_errors_propagate(self, mongo_db):
        store = MongoRepository(database=mongo_db)
        mongo_db.collections.fail_with = WriteError("duplicate key", code=11000)
        with pytest.raises(WriteError):
            await store.add(Collection.SALES, make_sale("s1"))


def test_storage_keys():
    assert sorted(STORAGE_KEYS.values()) == [
        "pp_complaints", "pp_feedbacks", "pp_floors", "pp_promoters", "pp_sales", "pp_settings",
    ]
