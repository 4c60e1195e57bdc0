"""
Entités du cache de métadonnées.

Une entrée de cache associe une clé opaque à un document JSON libre,
horodaté à l'écriture. La fraîcheur est évaluée à la lecture : une entrée
périmée reste physiquement présente jusqu'à sa réécriture.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class MediaKind(str, Enum):
    """Type de média exposé par l'API Trakt."""

    MOVIE = "movie"
    SHOW = "show"


class CacheStatus(str, Enum):
    """Statut de cache renvoyé au client dans le header x-cache."""

    HIT = "HIT"
    MISS = "MISS"


@dataclass
class CacheEntry:
    """
    Document stocké dans la collection de cache.

    Attributes:
        key: Clé unique (chemin + query serialisee, ou "kind:externalId")
        payload: Document JSON stocke (format libre, voir normalizer)
        created_at: Date de la derniere ecriture complete
        updated_at: Date du dernier enrichissement sur place
    """

    key: str
    payload: Any
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def age_hours(self, now: datetime) -> Optional[float]:
        """Age de l'entree en heures (reel), None si created_at est inconnu."""
        if self.created_at is None:
            return None
        created_at = self.created_at
        # Les dates naives (anciens documents Mongo) sont en UTC
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return (now - created_at).total_seconds() / 3600

    def is_fresh(self, now: datetime, ttl_hours: float) -> bool:
        """Une entree sans date de creation est consideree perimee."""
        age = self.age_hours(now)
        return age is not None and age <= ttl_hours


def utc_now() -> datetime:
    """Horloge par defaut des magasins de cache."""
    return datetime.now(timezone.utc)
