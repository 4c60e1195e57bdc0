"""
Service d'enrichissement des images pour les films deja en cache.

Quand un film est servi depuis le cache sans ses images, une requete
secondaire recupere la representation etendue (extended=images) et
fusionne uniquement l'objet images dans l'entree existante.

Cet enrichissement est opportuniste : aucune erreur ne remonte a la
requete principale, qui renvoie l'element d'origine en cas d'echec.
Les series, recherches et listes ne sont jamais enrichies.
"""

from typing import Any, Optional

from loguru import logger

from trakt_proxy.core.ports.api_clients import IUpstreamClient
from trakt_proxy.core.ports.cache_store import ICacheStore
from trakt_proxy.services.normalizer import build_payload


def extract_images(data: Any) -> Optional[dict[str, Any]]:
    """Extrait l'objet images d'une reponse (movie.images ou images)."""
    if not isinstance(data, dict):
        return None
    movie = data.get("movie")
    if isinstance(movie, dict) and isinstance(movie.get("images"), dict):
        return movie["images"]
    if isinstance(data.get("images"), dict):
        return data["images"]
    return None


def merge_images(item: Any, images: dict[str, Any]) -> Any:
    """
    Fusionne l'objet images dans l'element, sans toucher les autres champs.

    Un element enveloppe ({"movie": {...}}) recoit les images dans son
    sous-objet movie, un film nu les recoit a la racine.
    """
    if not isinstance(item, dict):
        return item
    movie = item.get("movie")
    if isinstance(movie, dict):
        return {**item, "movie": {**movie, "images": images}}
    return {**item, "images": images}


class ImageEnricherService:
    """
    Service de backfill des images d'un film servi depuis le cache.

    Effectue exactement une requete amont par declenchement et met a jour
    l'entree existante via update_in_place (jamais de creation d'entree).
    """

    def __init__(self, client: IUpstreamClient, store: ICacheStore) -> None:
        """
        Initialise le service d'enrichissement.

        Args:
            client: Client de l'API amont
            store: Magasin de cache partage
        """
        self._client = client
        self._store = store

    async def backfill(self, key: str, path: str, item: Any) -> Any:
        """
        Complete les images d'un film en cache.

        Args:
            key: Cle de l'entree servie (primaire ou d'element)
            path: Chemin de detail du film
            item: Element normalise sans images

        Returns:
            L'element enrichi, ou l'element d'origine en cas d'echec
        """
        try:
            response = await self._client.fetch_images(path)
            images = extract_images(response.data) if response.ok else None
            if images is None:
                logger.warning(
                    f"Images indisponibles pour {path} (HTTP {response.status_code})"
                )
                return item

            enriched = merge_images(item, images)
            updated = await self._store.update_in_place(key, build_payload(enriched, True))
        except Exception as e:
            logger.warning(f"Echec de l'enrichissement des images pour {path}: {e}")
            return item

        if updated:
            logger.info(f"Images ajoutees a l'entree {key}")
        else:
            logger.debug(f"Entree {key} disparue avant l'enrichissement")
        return enriched
