"""
Service d'orchestration du proxy Trakt.

Enchaine, pour chaque requete, les etapes du cache-aside :
routage -> lecture du cache -> normalisation -> enrichissement eventuel
-> sinon appel amont -> ecriture -> amorcage des elements d'une liste.

Toutes les etapes sont attendues sequentiellement dans la requete qui les
declenche ; aucune deduplication n'est faite entre requetes concurrentes
(le magasin est en derniere ecriture gagnante).
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from loguru import logger

from trakt_proxy.config import ConfigurationError
from trakt_proxy.core.entities.cache import CacheEntry, CacheStatus
from trakt_proxy.core.ports.api_clients import IUpstreamClient
from trakt_proxy.core.ports.cache_store import ICacheStore
from trakt_proxy.services.batch_seeder import BatchSeederService
from trakt_proxy.services.image_enricher import ImageEnricherService
from trakt_proxy.services.normalizer import build_payload, detect_images, normalize
from trakt_proxy.services.router import (
    RouteCategory,
    RouteInfo,
    classify,
    is_cacheable,
    item_key,
    primary_key,
)


@dataclass
class ProxyRequest:
    """Requete entrante, independante du framework web."""

    method: str
    path: str
    query: dict[str, str] = field(default_factory=dict)
    body: Any = None


@dataclass
class ProxyResponse:
    """
    Reponse a renvoyer au client.

    Attributes:
        status_code: Code HTTP
        body: Corps JSON (None pour une reponse vide)
        cache_status: HIT/MISS pour une requete traitee par le cache, None sinon
        headers: Headers amont relayes (pagination)
    """

    status_code: int
    body: Any = None
    cache_status: Optional[CacheStatus] = None
    headers: dict[str, str] = field(default_factory=dict)


class ProxyService:
    """
    Proxy cache-aside devant l'API Trakt.

    Le magasin, le client et les services secondaires sont injectes :
    aucune instance globale n'est utilisee.
    """

    def __init__(
        self,
        client: IUpstreamClient,
        store: ICacheStore,
        enricher: ImageEnricherService,
        seeder: BatchSeederService,
    ) -> None:
        """
        Initialise le proxy.

        Args:
            client: Client de l'API amont
            store: Magasin de cache partage
            enricher: Service de backfill des images
            seeder: Service d'amorcage des elements de liste
        """
        self._client = client
        self._store = store
        self._enricher = enricher
        self._seeder = seeder

    def _ensure_configured(self) -> None:
        if not self._client.is_configured:
            raise ConfigurationError("TRAKT_CLIENT_ID not configured")

    async def passthrough(self, request: ProxyRequest) -> ProxyResponse:
        """
        Relaie la requete sans aucune logique de cache.

        Raises:
            ConfigurationError: Cle client absente
            UpstreamError: Echec de l'appel amont
        """
        self._ensure_configured()
        response = await self._client.request(
            request.method, request.path, request.query, request.body
        )
        return ProxyResponse(response.status_code, response.data, headers=response.headers)

    async def handle(self, request: ProxyRequest) -> ProxyResponse:
        """
        Traite une requete avec le cache lorsqu'elle y est eligible.

        Sans magasin disponible, la requete est simplement relayee.

        Raises:
            ConfigurationError: Cle client absente
            UpstreamError: Echec de l'appel amont principal
        """
        self._ensure_configured()
        if not is_cacheable(request.method, request.path):
            return await self.passthrough(request)
        if not self._store.is_available:
            logger.debug(f"Cache indisponible, relais direct de {request.path}")
            return await self.passthrough(request)

        route = classify(request.path)
        key = primary_key(route.path, request.query)

        entry = await self._lookup(route, key, request.query)
        if entry is not None:
            return await self._serve_hit(route, entry)
        return await self._fetch_and_store(request, route, key)

    async def _lookup(
        self, route: RouteInfo, key: str, query: dict[str, str]
    ) -> Optional[CacheEntry]:
        """Cherche la cle primaire, puis la cle d'element amorcee pour un detail sans query."""
        keys = [key]
        if route.category is RouteCategory.DETAIL and not query:
            keys.append(item_key(route.kind, route.item_id))

        for candidate in keys:
            try:
                entry = await self._store.get(candidate)
            except Exception as e:
                logger.warning(f"Lecture du cache impossible pour {candidate}: {e}")
                return None
            if entry is not None:
                return entry
        return None

    async def _serve_hit(self, route: RouteInfo, entry: CacheEntry) -> ProxyResponse:
        normalized = normalize(entry.payload)
        logger.debug(f"HIT {entry.key} (format {normalized.shape.value})")

        item = normalized.item
        if route.is_movie_detail and not normalized.has_images:
            item = await self._enricher.backfill(entry.key, route.path, item)

        return ProxyResponse(200, item, normalized.cache_status)

    async def _fetch_and_store(
        self, request: ProxyRequest, route: RouteInfo, key: str
    ) -> ProxyResponse:
        logger.debug(f"MISS {key}")
        response = await self._client.request("GET", route.path, request.query)

        # Requete cacheable servie : toujours 200. Le corps d'erreur amont
        # (404, 5xx) est relaye mais jamais mis en cache.
        if not response.ok:
            logger.debug(f"Reponse amont HTTP {response.status_code} non mise en cache: {key}")
            return ProxyResponse(200, response.data, CacheStatus.MISS, response.headers)

        try:
            await self._store.set(key, build_payload(response.data, detect_images(response.data)))
        except Exception as e:
            logger.warning(f"Ecriture du cache impossible pour {key}: {e}")

        if route.category is RouteCategory.LIST:
            try:
                await self._seeder.seed(route.kind, response.data)
            except Exception as e:
                logger.warning(f"Amorcage interrompu pour {route.path}: {e}")

        return ProxyResponse(200, response.data, CacheStatus.MISS, response.headers)
