"""
Interface port pour le magasin de cache.

Le magasin est une collection cle/document partagee par toutes les requetes.
La fraicheur est un predicat de lecture : get() ignore les entrees perimees
mais ne les supprime jamais. Les implementations (disque, MongoDB) sont
injectees dans les services, jamais importees directement.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from trakt_proxy.core.entities.cache import CacheEntry


class ICacheStore(ABC):
    """
    Interface de stockage des reponses mises en cache.

    Toutes les ecritures sont des upserts par cle (derniere ecriture gagnante).
    """

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Vrai si le magasin est connecte et utilisable."""
        ...

    @abstractmethod
    async def connect(self) -> bool:
        """Ouvre le magasin. Retourne la disponibilite, ne leve jamais."""
        ...

    @abstractmethod
    async def get(self, key: str) -> Optional[CacheEntry]:
        """Retourne l'entree si elle existe et est encore fraiche (TTL)."""
        ...

    @abstractmethod
    async def peek(self, key: str) -> Optional[CacheEntry]:
        """Retourne l'entree si elle existe, fraiche ou non."""
        ...

    @abstractmethod
    async def set(self, key: str, payload: Any) -> None:
        """Upsert complet : remplace le payload et remet created_at a maintenant."""
        ...

    @abstractmethod
    async def update_in_place(self, key: str, payload: Any) -> bool:
        """
        Remplace le payload d'une entree existante et met a jour updated_at.

        Ne verifie pas le TTL, ne touche pas created_at et ne cree jamais
        d'entree. Retourne False si la cle est absente.
        """
        ...

    @abstractmethod
    async def set_if_absent(self, key: str, payload: Any) -> bool:
        """Insere l'entree seulement si la cle n'existe pas. Retourne True si ecrite."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Ferme la connexion au magasin."""
        ...
