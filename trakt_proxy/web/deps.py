"""
Dépendances partagées de l'application web.

Les services sont résolus depuis le Container DI attaché à app.state
par le lifespan, ce qui permet de le remplacer dans les tests.
"""

from fastapi import Request

from ..core.ports.cache_store import ICacheStore
from ..services.proxy import ProxyService


def get_proxy_service(request: Request) -> ProxyService:
    """Service proxy partagé."""
    return request.app.state.container.proxy_service()


def get_cache_store(request: Request) -> ICacheStore:
    """Magasin de cache partagé (pour l'état de santé)."""
    return request.app.state.container.cache_store()
