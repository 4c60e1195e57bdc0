"""
Service d'amorcage du cache par element depuis les listes Trakt.

Apres un MISS sur une liste (tendances, populaires), chaque element de la
reponse est stocke sous sa propre cle "kind:externalId" afin que la
consultation du detail soit servie depuis le cache.

Le type attendu est transmis explicitement par la route ; les heuristiques
sur les champs ne servent que pour les elements sans sous-objet movie/show.
L'amorcage est additif : une entree existante n'est jamais ecrasee.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from loguru import logger

from trakt_proxy.core.entities.cache import MediaKind
from trakt_proxy.core.ports.cache_store import ICacheStore
from trakt_proxy.services.normalizer import MARKER_FIELDS, build_payload, detect_images
from trakt_proxy.services.router import item_key

SHOW_FIELDS = ("first_aired", "seasons", "episode_count")
# title/year sont communs aux deux types et ne tranchent rien.
MOVIE_FIELDS = ("released", "tagline")


@dataclass
class SeedStats:
    """Statistiques d'amorcage d'une liste."""

    total: int = 0
    seeded: int = 0
    skipped: int = 0
    failed: int = 0


def classify_fields(element: dict[str, Any]) -> Optional[MediaKind]:
    """
    Devine le type d'un element nu a partir de ses champs propres.

    Retourne None quand aucun champ ne permet de trancher (title/year
    seuls, par exemple).
    """
    if any(field in element for field in SHOW_FIELDS):
        return MediaKind.SHOW
    if any(field in element for field in MOVIE_FIELDS):
        return MediaKind.MOVIE
    return None


def decode_element(kind: MediaKind, element: Any) -> Optional[dict[str, Any]]:
    """Extrait l'element du type attendu, ou None s'il ne correspond pas."""
    if not isinstance(element, dict):
        return None
    nested = element.get(kind.value)
    if isinstance(nested, dict):
        return nested
    other = MediaKind.SHOW if kind is MediaKind.MOVIE else MediaKind.MOVIE
    if isinstance(element.get(other.value), dict):
        return None
    if classify_fields(element) is other:
        return None
    return element


def iter_elements(kind: MediaKind, data: Any) -> Iterator[tuple[str, Any]]:
    """
    Decompose une reponse de liste en (position, element brut).

    Accepte un tableau, un objet a cles numeriques (ancien tableau etale)
    ou un objet unique portant un sous-objet du type attendu.
    """
    if isinstance(data, list):
        for index, element in enumerate(data):
            yield str(index), element
        return
    if not isinstance(data, dict):
        return

    keys = [k for k in data if k not in MARKER_FIELDS]
    if keys and all(k.isdigit() for k in keys):
        for k in sorted(keys, key=int):
            yield k, data[k]
    elif isinstance(data.get(kind.value), dict):
        yield "0", data


def external_id(item: dict[str, Any]) -> str:
    """Identifiant Trakt de l'element (ids.trakt, sinon ids.slug)."""
    ids = item.get("ids")
    if isinstance(ids, dict):
        for name in ("trakt", "slug"):
            value = ids.get(name)
            if value not in (None, ""):
                return str(value)
    raise ValueError("identifiant trakt/slug absent")


class BatchSeederService:
    """
    Service d'amorcage des entrees par element depuis une reponse de liste.

    Chaque element est traite isolement : une erreur de decodage ou
    d'ecriture est journalisee et n'interrompt pas les suivants.
    """

    def __init__(self, store: ICacheStore) -> None:
        """
        Args:
            store: Magasin de cache partage
        """
        self._store = store

    async def seed(self, kind: MediaKind, data: Any) -> SeedStats:
        """
        Amorce une entree par element decodable non encore en cache.

        Args:
            kind: Type de media de la route (film ou serie)
            data: Reponse amont de la liste

        Returns:
            Statistiques d'amorcage
        """
        stats = SeedStats()

        for position, element in iter_elements(kind, data):
            stats.total += 1
            try:
                item = decode_element(kind, element)
                if item is None:
                    raise ValueError(f"element non reconnu comme {kind.value}")
                key = item_key(kind, external_id(item))
                created = await self._store.set_if_absent(
                    key, build_payload(item, detect_images(item))
                )
            except Exception as e:
                logger.warning(f"Element {position} ignore lors de l'amorcage: {e}")
                stats.failed += 1
                continue

            if created:
                stats.seeded += 1
            else:
                stats.skipped += 1

        logger.info(
            f"Amorcage {kind.value}: {stats.seeded} creees, "
            f"{stats.skipped} deja en cache, {stats.failed} en echec"
        )
        return stats
