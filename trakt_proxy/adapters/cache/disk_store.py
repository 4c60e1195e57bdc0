"""
Magasin de cache persistant sur disque.

Le magasin utilise diskcache pour la persistence sur disque, ce qui permet
de conserver les reponses entre les redemarrages de l'application.

Chaque cle contient un document {payload, created_at, updated_at}.
diskcache n'expire jamais les documents : la fraicheur (TTL 24h par defaut)
est evaluee a la lecture, comme sur la collection MongoDB.
"""

import asyncio
import sqlite3
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional

from diskcache import Cache
from loguru import logger

from trakt_proxy.core.entities.cache import CacheEntry, utc_now
from trakt_proxy.core.ports.cache_store import ICacheStore


class DiskCacheStore(ICacheStore):
    """
    Magasin de cache asynchrone adosse a un repertoire diskcache.

    Utilise run_in_executor pour que les operations disque ne bloquent
    pas la boucle d'evenements.

    Example:
        store = DiskCacheStore(cache_dir=".cache/trakt")
        await store.connect()
        await store.set("/movies/1{}", payload)
        entry = await store.get("/movies/1{}")
    """

    def __init__(
        self,
        cache_dir: str | Path = ".cache/trakt",
        ttl_hours: float = 24.0,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialise le magasin (sans ouvrir le repertoire).

        Args:
            cache_dir: Chemin vers le repertoire du cache (cree si inexistant)
            ttl_hours: Duree de fraicheur des entrees en heures
            clock: Horloge retournant un datetime UTC
        """
        self._cache_dir = str(cache_dir)
        self._ttl_hours = ttl_hours
        self._clock = clock
        self._cache: Optional[Cache] = None

    @property
    def is_available(self) -> bool:
        return self._cache is not None

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args))

    def _require(self) -> Cache:
        if self._cache is None:
            raise RuntimeError("Magasin de cache disque non connecte")
        return self._cache

    async def connect(self) -> bool:
        """Ouvre le repertoire diskcache. Retourne False en cas d'echec."""
        if self._cache is not None:
            return True
        try:
            self._cache = await self._run(Cache, self._cache_dir)
        except (OSError, sqlite3.Error) as e:
            logger.error(f"Impossible d'ouvrir le cache disque {self._cache_dir}: {e}")
            return False
        logger.info(f"Cache disque ouvert: {self._cache_dir}")
        return True

    @staticmethod
    def _to_entry(key: str, doc: dict[str, Any]) -> CacheEntry:
        return CacheEntry(
            key=key,
            payload=doc.get("payload"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    async def peek(self, key: str) -> Optional[CacheEntry]:
        """Recupere une entree sans verifier sa fraicheur."""
        doc = await self._run(self._require().get, key)
        if doc is None:
            return None
        return self._to_entry(key, doc)

    async def get(self, key: str) -> Optional[CacheEntry]:
        """
        Recupere une entree du cache.

        Args:
            key: Cle unique identifiant la reponse

        Returns:
            L'entree stockee ou None si absente ou perimee
        """
        entry = await self.peek(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock(), self._ttl_hours):
            logger.debug(f"Entree perimee ignoree: {key}")
            return None
        return entry

    async def set(self, key: str, payload: Any) -> None:
        """
        Stocke une reponse (remplace l'entree existante).

        Args:
            key: Cle unique identifiant la reponse
            payload: Document a stocker (doit etre serializable)
        """
        doc = {"payload": payload, "created_at": self._clock(), "updated_at": None}
        await self._run(self._require().set, key, doc)

    async def update_in_place(self, key: str, payload: Any) -> bool:
        """Remplace le payload d'une entree existante, sans toucher created_at."""
        cache = self._require()
        now = self._clock()

        def _update() -> bool:
            with cache.transact():
                doc = cache.get(key)
                if doc is None:
                    return False
                cache.set(key, {**doc, "payload": payload, "updated_at": now})
                return True

        return await self._run(_update)

    async def set_if_absent(self, key: str, payload: Any) -> bool:
        """Insere l'entree uniquement si la cle est libre (Cache.add est atomique)."""
        doc = {"payload": payload, "created_at": self._clock(), "updated_at": None}
        return await self._run(self._require().add, key, doc)

    async def close(self) -> None:
        """Ferme le cache (a appeler a l'arret)."""
        if self._cache is not None:
            self._cache.close()
            self._cache = None
