"""
Tests unitaires pour MongoCacheStore.

MongoClient est mocke : ces tests verifient les requetes envoyees a la
collection (upserts, $setOnInsert) et la conversion des documents
historiques {key, data, createdAt, updatedAt}.
"""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from trakt_proxy.adapters.cache.mongo_store import MongoCacheStore
from tests.fixtures.clock import FakeClock

_MONGO_CLIENT = "trakt_proxy.adapters.cache.mongo_store.MongoClient"


@pytest.fixture
def mock_collection() -> MagicMock:
    """Collection MongoDB mockee (aucun document par defaut)."""
    collection = MagicMock()
    collection.find_one.return_value = None
    return collection


@pytest.fixture
def mock_mongo_client(mock_collection: MagicMock):
    """Patche MongoClient pour retourner la collection mockee."""
    with patch(_MONGO_CLIENT) as mock_cls:
        client = MagicMock()
        client.__getitem__.return_value.__getitem__.return_value = mock_collection
        mock_cls.return_value = client
        yield client


class TestMongoConnect:
    """Tests de connexion."""

    @pytest.mark.asyncio
    async def test_connect_pings_and_creates_unique_index(
        self, mock_mongo_client: MagicMock, mock_collection: MagicMock, clock: FakeClock
    ) -> None:
        store = MongoCacheStore(uri="mongodb://localhost:27017", clock=clock)

        assert await store.connect() is True

        assert store.is_available is True
        mock_mongo_client.admin.command.assert_called_once_with("ping")
        mock_collection.create_index.assert_called_once_with("key", unique=True)

    @pytest.mark.asyncio
    async def test_connect_failure_leaves_store_unavailable(
        self, mock_mongo_client: MagicMock, clock: FakeClock
    ) -> None:
        mock_mongo_client.admin.command.side_effect = ServerSelectionTimeoutError("down")
        store = MongoCacheStore(uri="mongodb://localhost:27017", clock=clock)

        assert await store.connect() is False

        assert store.is_available is False
        mock_mongo_client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_close_makes_store_unavailable(
        self, mock_mongo_client: MagicMock, clock: FakeClock
    ) -> None:
        store = MongoCacheStore(uri="mongodb://localhost:27017", clock=clock)
        await store.connect()

        await store.close()

        assert store.is_available is False
        mock_mongo_client.close.assert_called_once()


class TestMongoReads:
    """Tests de lecture et de fraicheur."""

    @pytest.mark.asyncio
    async def test_get_maps_legacy_document(
        self, mock_mongo_client, mock_collection: MagicMock, clock: FakeClock
    ) -> None:
        store = MongoCacheStore(uri="mongodb://x", clock=clock)
        await store.connect()
        mock_collection.find_one.return_value = {
            "key": "/movies/1{}",
            "data": {"data": {"title": "TRON"}},
            "createdAt": clock.now - timedelta(hours=1),
        }

        entry = await store.get("/movies/1{}")

        mock_collection.find_one.assert_called_with({"key": "/movies/1{}"})
        assert entry.payload == {"data": {"title": "TRON"}}
        assert entry.updated_at is None

    @pytest.mark.asyncio
    async def test_get_ignores_stale_document(
        self, mock_mongo_client, mock_collection: MagicMock, clock: FakeClock
    ) -> None:
        store = MongoCacheStore(uri="mongodb://x", clock=clock)
        await store.connect()
        mock_collection.find_one.return_value = {
            "key": "k",
            "data": {},
            "createdAt": clock.now - timedelta(hours=24, seconds=1),
        }

        assert await store.get("k") is None
        assert await store.peek("k") is not None

    @pytest.mark.asyncio
    async def test_document_without_created_at_is_stale(
        self, mock_mongo_client, mock_collection: MagicMock, clock: FakeClock
    ) -> None:
        store = MongoCacheStore(uri="mongodb://x", clock=clock)
        await store.connect()
        mock_collection.find_one.return_value = {"key": "k", "data": {}}

        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_naive_created_at_is_read_as_utc(
        self, mock_mongo_client, mock_collection: MagicMock, clock: FakeClock
    ) -> None:
        store = MongoCacheStore(uri="mongodb://x", clock=clock)
        await store.connect()
        naive = (clock.now - timedelta(hours=2)).replace(tzinfo=None)
        mock_collection.find_one.return_value = {"key": "k", "data": {}, "createdAt": naive}

        assert await store.get("k") is not None


class TestMongoWrites:
    """Tests des ecritures."""

    @pytest.mark.asyncio
    async def test_set_upserts_with_created_at(
        self, mock_mongo_client, mock_collection: MagicMock, clock: FakeClock
    ) -> None:
        store = MongoCacheStore(uri="mongodb://x", clock=clock)
        await store.connect()

        await store.set("k", {"v": 1})

        mock_collection.update_one.assert_called_once_with(
            {"key": "k"},
            {"$set": {"data": {"v": 1}, "createdAt": clock.now}, "$unset": {"updatedAt": ""}},
            upsert=True,
        )

    @pytest.mark.asyncio
    async def test_update_in_place_never_upserts(
        self, mock_mongo_client, mock_collection: MagicMock, clock: FakeClock
    ) -> None:
        store = MongoCacheStore(uri="mongodb://x", clock=clock)
        await store.connect()
        mock_collection.update_one.return_value = MagicMock(matched_count=0)

        assert await store.update_in_place("k", {"v": 2}) is False

        mock_collection.update_one.assert_called_once_with(
            {"key": "k"},
            {"$set": {"data": {"v": 2}, "updatedAt": clock.now}},
        )

    @pytest.mark.asyncio
    async def test_set_if_absent_uses_set_on_insert(
        self, mock_mongo_client, mock_collection: MagicMock, clock: FakeClock
    ) -> None:
        store = MongoCacheStore(uri="mongodb://x", clock=clock)
        await store.connect()
        mock_collection.update_one.return_value = MagicMock(upserted_id="abc")

        assert await store.set_if_absent("movie:1", {"v": 1}) is True

        mock_collection.update_one.assert_called_once_with(
            {"key": "movie:1"},
            {"$setOnInsert": {"data": {"v": 1}, "createdAt": clock.now}},
            upsert=True,
        )

    @pytest.mark.asyncio
    async def test_set_if_absent_reports_existing_key(
        self, mock_mongo_client, mock_collection: MagicMock, clock: FakeClock
    ) -> None:
        store = MongoCacheStore(uri="mongodb://x", clock=clock)
        await store.connect()
        mock_collection.update_one.return_value = MagicMock(upserted_id=None)

        assert await store.set_if_absent("movie:1", {"v": 1}) is False
