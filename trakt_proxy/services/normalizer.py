"""
Normalisation des payloads stockes dans le cache.

Les nouvelles ecritures utilisent une enveloppe versionnee explicite :
    {"_cacheFormat": 2, "item": <element>, "hasImages": bool}

La collection contient encore trois formats historiques, lus dans cet ordre :
1. double imbrication  {"data": {"data": <element>}}
2. imbrication simple  {"data": <element>}
3. direct              <element> + champs marqueurs hasImages / cacheStatus

Les deux formats imbriques precedent le marqueur d'images et sont consideres
complets. Les champs marqueurs ne doivent jamais atteindre un client.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from trakt_proxy.core.entities.cache import CacheStatus

FORMAT_KEY = "_cacheFormat"
FORMAT_VERSION = 2

# Marqueurs internes, avec leur ancienne orthographe prefixee
HAS_IMAGES_MARKERS = ("hasImages", "_hasImages")
CACHE_STATUS_MARKERS = ("cacheStatus", "_cacheStatus")
MARKER_FIELDS = HAS_IMAGES_MARKERS + CACHE_STATUS_MARKERS


class PayloadShape(str, Enum):
    """Format detecte d'un payload de cache."""

    TAGGED = "tagged"
    DOUBLE_NESTED = "double_nested"
    SINGLE_NESTED = "single_nested"
    DIRECT = "direct"
    RAW = "raw"


@dataclass
class NormalizedItem:
    """
    Element logique extrait d'un payload de cache.

    Attributes:
        item: Element tel que renvoye au client (sans marqueurs)
        has_images: Vrai si l'element porte deja ses images
        cache_status: Statut a renvoyer dans x-cache
        shape: Format detecte (pour les logs et l'inspection)
    """

    item: Any
    has_images: bool
    cache_status: CacheStatus = CacheStatus.HIT
    shape: PayloadShape = PayloadShape.RAW


def build_payload(item: Any, has_images: bool) -> dict[str, Any]:
    """Construit l'enveloppe versionnee utilisee pour toute nouvelle ecriture."""
    return {FORMAT_KEY: FORMAT_VERSION, "item": item, "hasImages": bool(has_images)}


def detect_images(item: Any) -> bool:
    """Vrai si l'element (ou son sous-objet movie) porte un objet images non vide."""
    if not isinstance(item, dict):
        return False
    movie = item.get("movie")
    if isinstance(movie, dict) and movie.get("images"):
        return True
    return bool(item.get("images"))


def strip_markers(item: Any) -> Any:
    """Retourne une copie de l'element sans champs marqueurs."""
    if not isinstance(item, dict):
        return item
    return {k: v for k, v in item.items() if k not in MARKER_FIELDS}


def _restore_list(item: Any) -> Any:
    """Un tableau autrefois etale en objet ("0", "1", ...) redevient une liste."""
    if not isinstance(item, dict) or not item:
        return item
    if not all(isinstance(k, str) and k.isdigit() for k in item):
        return item
    indexes = sorted(int(k) for k in item)
    if indexes != list(range(len(indexes))):
        return item
    return [item[str(i)] for i in indexes]


def _first_marker(payload: dict[str, Any], names: tuple[str, ...]) -> Any:
    for name in names:
        if name in payload:
            return payload[name]
    return None


def _read_status(value: Any) -> CacheStatus:
    if value == CacheStatus.MISS.value:
        return CacheStatus.MISS
    return CacheStatus.HIT


def normalize(payload: Any) -> NormalizedItem:
    """
    Reconcilie un payload de cache en element logique.

    Fonction totale : un payload incoherent est renvoye tel quel
    avec has_images=False.
    """
    if not isinstance(payload, dict):
        return NormalizedItem(payload, False, shape=PayloadShape.RAW)

    if payload.get(FORMAT_KEY) == FORMAT_VERSION and "item" in payload:
        return NormalizedItem(
            strip_markers(payload["item"]),
            bool(payload.get("hasImages")),
            shape=PayloadShape.TAGGED,
        )

    data = payload.get("data")
    if isinstance(data, dict) and data.get("data") is not None:
        return NormalizedItem(
            strip_markers(data["data"]), True, shape=PayloadShape.DOUBLE_NESTED
        )
    if data is not None:
        return NormalizedItem(strip_markers(data), True, shape=PayloadShape.SINGLE_NESTED)

    if any(marker in payload for marker in MARKER_FIELDS):
        has_images = _first_marker(payload, HAS_IMAGES_MARKERS)
        status = _first_marker(payload, CACHE_STATUS_MARKERS)
        return NormalizedItem(
            _restore_list(strip_markers(payload)),
            bool(has_images),
            _read_status(status),
            PayloadShape.DIRECT,
        )

    return NormalizedItem(payload, False, shape=PayloadShape.RAW)
