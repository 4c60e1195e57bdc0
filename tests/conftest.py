"""
Fixtures pytest partagees pour les tests Trakt Proxy.

Ce module contient les fixtures communes utilisees dans les tests:
- Horloge controlable pour tester la fraicheur du cache
- Magasin diskcache reel dans un repertoire temporaire
- Client Trakt de test et proxy complet assemble
- Settings de test avec chemins temporaires
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator

import pytest
import pytest_asyncio

from trakt_proxy.adapters.api.trakt_client import TraktClient
from trakt_proxy.adapters.cache.disk_store import DiskCacheStore
from trakt_proxy.config import Settings
from trakt_proxy.services.batch_seeder import BatchSeederService
from trakt_proxy.services.image_enricher import ImageEnricherService
from trakt_proxy.services.proxy import ProxyService
from tests.fixtures.clock import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    """Horloge figee au 1er mars 2026 a midi (UTC)."""
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest_asyncio.fixture
async def disk_store(tmp_path: Path, clock: FakeClock) -> AsyncIterator[DiskCacheStore]:
    """Magasin diskcache connecte dans un repertoire temporaire."""
    store = DiskCacheStore(cache_dir=tmp_path / "cache", ttl_hours=24.0, clock=clock)
    await store.connect()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def trakt_client() -> AsyncIterator[TraktClient]:
    """Client Trakt de test (une seule tentative sur 429)."""
    client = TraktClient(client_id="test_client_id", max_attempts=1)
    yield client
    await client.close()


@pytest.fixture
def proxy_service(trakt_client: TraktClient, disk_store: DiskCacheStore) -> ProxyService:
    """Proxy complet : vrai client (mocke par respx) et vrai magasin disque."""
    return ProxyService(
        client=trakt_client,
        store=disk_store,
        enricher=ImageEnricherService(trakt_client, disk_store),
        seeder=BatchSeederService(disk_store),
    )


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings de test avec chemins temporaires."""
    return Settings(
        client_id="test_client_id",
        cache_dir=tmp_path / "cache",
        log_file=tmp_path / "test.log",
    )
