"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web.
Le magasin de cache est choisi par la configuration (disk ou mongo) et
injecte dans tous les services : aucun singleton de module.
"""

from dependency_injector import containers, providers

from .adapters.api.trakt_client import TraktClient
from .adapters.cache.disk_store import DiskCacheStore
from .adapters.cache.mongo_store import MongoCacheStore
from .config import Settings
from .services.batch_seeder import BatchSeederService
from .services.image_enricher import ImageEnricherService
from .services.proxy import ProxyService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        store = container.cache_store()
        await store.connect()
        proxy = container.proxy_service()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Magasin de cache - Singleton partage par toutes les requetes
    cache_store = providers.Selector(
        config.provided.cache_backend,
        disk=providers.Singleton(
            DiskCacheStore,
            cache_dir=config.provided.cache_dir,
            ttl_hours=config.provided.cache_ttl_hours,
        ),
        mongo=providers.Singleton(
            MongoCacheStore,
            uri=config.provided.mongo_uri,
            database=config.provided.mongo_database,
            ttl_hours=config.provided.cache_ttl_hours,
        ),
    )

    # Client API - Singleton, le client httpx est cree paresseusement
    trakt_client = providers.Singleton(
        TraktClient,
        client_id=config.provided.client_id,
        base_url=config.provided.base_url,
        api_version=config.provided.api_version,
        timeout=config.provided.upstream_timeout,
        max_attempts=config.provided.retry_max_attempts,
    )

    # Services (sans etat propre - Singletons)
    image_enricher = providers.Singleton(
        ImageEnricherService,
        client=trakt_client,
        store=cache_store,
    )
    batch_seeder = providers.Singleton(
        BatchSeederService,
        store=cache_store,
    )
    proxy_service = providers.Singleton(
        ProxyService,
        client=trakt_client,
        store=cache_store,
        enricher=image_enricher,
        seeder=batch_seeder,
    )
