"""
Magasin de cache adosse a une collection MongoDB.

Reprend la disposition de la collection "cache" historique :
{key, data, createdAt, updatedAt}, une entree par cle (index unique).
Les documents ecrits par les versions precedentes restent lisibles tels
quels ; le normalizer reconcilie leurs formats.

pymongo est synchrone : chaque appel est execute dans l'executor par defaut.
"""

import asyncio
from datetime import datetime
from functools import partial
from typing import Any, Callable, Optional

from loguru import logger
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from trakt_proxy.core.entities.cache import CacheEntry, utc_now
from trakt_proxy.core.ports.cache_store import ICacheStore


class MongoCacheStore(ICacheStore):
    """
    Magasin de cache MongoDB.

    Attributes:
        COLLECTION_NAME: Nom de la collection de cache
    """

    COLLECTION_NAME = "cache"

    def __init__(
        self,
        uri: str,
        database: str = "trakt_proxy",
        ttl_hours: float = 24.0,
        clock: Callable[[], datetime] = utc_now,
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        self._uri = uri
        self._database = database
        self._ttl_hours = ttl_hours
        self._clock = clock
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[MongoClient] = None
        self._collection: Optional[Collection] = None

    @property
    def is_available(self) -> bool:
        return self._collection is not None

    async def _run(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    def _require(self) -> Collection:
        if self._collection is None:
            raise RuntimeError("Magasin de cache MongoDB non connecte")
        return self._collection

    async def connect(self) -> bool:
        """
        Se connecte a MongoDB et garantit l'index unique sur key.

        Un echec laisse le magasin indisponible : le proxy passe alors
        en relais pur au lieu d'echouer.
        """
        if self._collection is not None:
            return True
        client: Optional[MongoClient] = None
        try:
            # URI invalide : leve une ConfigurationError pymongo (PyMongoError)
            client = MongoClient(
                self._uri,
                tz_aware=True,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
            )
            await self._run(client.admin.command, "ping")
            collection = client[self._database][self.COLLECTION_NAME]
            await self._run(collection.create_index, "key", unique=True)
        except PyMongoError as e:
            logger.error(f"Connexion MongoDB impossible ({self._database}): {e}")
            if client is not None:
                client.close()
            return False

        self._client = client
        self._collection = collection
        logger.info(f"Cache MongoDB connecte: {self._database}.{self.COLLECTION_NAME}")
        return True

    @staticmethod
    def _to_entry(doc: dict[str, Any]) -> CacheEntry:
        return CacheEntry(
            key=doc["key"],
            payload=doc.get("data"),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )

    async def peek(self, key: str) -> Optional[CacheEntry]:
        doc = await self._run(self._require().find_one, {"key": key})
        if doc is None:
            return None
        return self._to_entry(doc)

    async def get(self, key: str) -> Optional[CacheEntry]:
        """Retourne l'entree si elle a moins de ttl_hours, None sinon."""
        entry = await self.peek(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock(), self._ttl_hours):
            logger.debug(f"Entree perimee ignoree: {key}")
            return None
        return entry

    async def set(self, key: str, payload: Any) -> None:
        await self._run(
            self._require().update_one,
            {"key": key},
            {"$set": {"data": payload, "createdAt": self._clock()}, "$unset": {"updatedAt": ""}},
            upsert=True,
        )

    async def update_in_place(self, key: str, payload: Any) -> bool:
        result = await self._run(
            self._require().update_one,
            {"key": key},
            {"$set": {"data": payload, "updatedAt": self._clock()}},
        )
        return result.matched_count > 0

    async def set_if_absent(self, key: str, payload: Any) -> bool:
        result = await self._run(
            self._require().update_one,
            {"key": key},
            {"$setOnInsert": {"data": payload, "createdAt": self._clock()}},
            upsert=True,
        )
        return result.upserted_id is not None

    async def close(self) -> None:
        """Ferme la connexion MongoDB."""
        if self._client is not None:
            self._client.close()
        self._client = None
        self._collection = None
