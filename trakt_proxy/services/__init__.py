"""
Couche application : services du proxy.

- router: eligibilite au cache et derivation des cles
- normalizer: reconciliation des formats de payload
- image_enricher: backfill des images des films en cache
- batch_seeder: amorcage des entrees par element depuis les listes
- proxy: orchestration cache-aside d'une requete
"""

from trakt_proxy.services.batch_seeder import BatchSeederService, SeedStats
from trakt_proxy.services.image_enricher import ImageEnricherService
from trakt_proxy.services.proxy import ProxyRequest, ProxyResponse, ProxyService

__all__ = [
    "BatchSeederService",
    "ImageEnricherService",
    "ProxyRequest",
    "ProxyResponse",
    "ProxyService",
    "SeedStats",
]
