"""
Routage des requetes proxy et derivation des cles de cache.

Decide si une requete est eligible au cache et classe son chemin
(detail, liste, recherche). Le type de media (film/serie) est toujours
deduit du chemin, jamais des champs de la reponse.

Deux familles de cles, disjointes par construction :
- cle primaire : chemin normalise + query JSON, commence toujours par "/"
- cle d'element : "kind:externalId", ne commence jamais par "/"
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from trakt_proxy.core.entities.cache import MediaKind

CACHEABLE_PREFIXES = (
    "/movies/",
    "/shows/",
    "/search/",
)

LIST_PATHS = {
    "/movies/trending": MediaKind.MOVIE,
    "/movies/popular": MediaKind.MOVIE,
    "/shows/trending": MediaKind.SHOW,
    "/shows/popular": MediaKind.SHOW,
}

_KIND_ROOTS = {
    "movies": MediaKind.MOVIE,
    "shows": MediaKind.SHOW,
}

# Segments Trakt qui designent une liste et non un identifiant
_RESERVED_SEGMENTS = frozenset(
    {
        "trending",
        "popular",
        "favorited",
        "played",
        "watched",
        "collected",
        "anticipated",
        "boxoffice",
        "updates",
        "recommended",
    }
)


class RouteCategory(str, Enum):
    """Categorie fonctionnelle d'un chemin Trakt."""

    DETAIL = "detail"
    LIST = "list"
    SEARCH = "search"
    OTHER = "other"


@dataclass(frozen=True)
class RouteInfo:
    """
    Classification d'un chemin de requete.

    Attributes:
        path: Chemin normalise (sans query ni / final)
        category: Categorie (detail, liste, recherche, autre)
        kind: Type de media si le chemin est sous /movies ou /shows
        item_id: Identifiant de l'element pour un chemin de detail
    """

    path: str
    category: RouteCategory
    kind: Optional[MediaKind] = None
    item_id: Optional[str] = None

    @property
    def is_movie_detail(self) -> bool:
        return self.category is RouteCategory.DETAIL and self.kind is MediaKind.MOVIE


def normalize_path(path: str) -> str:
    """Supprime la query string et les / finaux ("/" reste "/")."""
    path = path.split("?", 1)[0]
    if not path.startswith("/"):
        path = "/" + path
    return path.rstrip("/") or "/"


def is_cacheable(method: str, path: str) -> bool:
    """
    Indique si une requete est eligible au cache.

    Seules les requetes GET sur les prefixes films, series, recherche,
    tendances et populaires le sont.
    """
    if method.upper() != "GET":
        return False
    normalized = normalize_path(path)
    return normalized in LIST_PATHS or normalized.startswith(CACHEABLE_PREFIXES)


def classify(path: str) -> RouteInfo:
    """Classe un chemin Trakt (detail, liste, recherche ou autre)."""
    normalized = normalize_path(path)
    if normalized in LIST_PATHS:
        return RouteInfo(normalized, RouteCategory.LIST, LIST_PATHS[normalized])
    if normalized.startswith("/search/"):
        return RouteInfo(normalized, RouteCategory.SEARCH)

    segments = normalized.strip("/").split("/")
    kind = _KIND_ROOTS.get(segments[0])
    if kind is None:
        return RouteInfo(normalized, RouteCategory.OTHER)
    if len(segments) == 2 and segments[1] not in _RESERVED_SEGMENTS:
        return RouteInfo(normalized, RouteCategory.DETAIL, kind, segments[1])
    return RouteInfo(normalized, RouteCategory.OTHER, kind)


def primary_key(path: str, query: Optional[Mapping[str, str]] = None) -> str:
    """Cle primaire : chemin normalise suivi de la query serialisee (cles triees)."""
    serialized = json.dumps(dict(query or {}), sort_keys=True, separators=(",", ":"))
    return normalize_path(path) + serialized


def item_key(kind: MediaKind, external_id: str | int) -> str:
    """Cle d'element alimentee par les listes : "movie:12601"."""
    return f"{kind.value}:{external_id}"
