"""
Application FastAPI de Trakt Proxy.

Initialise l'application web avec le Container DI, connecte le magasin
de cache au démarrage et monte les routes.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ..container import Container
from .routes.health import router as health_router
from .routes.proxy import router as proxy_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise le Container DI au démarrage et libère les ressources à l'arrêt."""
    container = Container()
    store = container.cache_store()
    if not await store.connect():
        logger.warning("Cache indisponible : le proxy fonctionnera en relais direct")
    if not container.config().trakt_enabled:
        logger.warning("TRAKT_PROXY_CLIENT_ID absent : toutes les requêtes proxy échoueront")
    app.state.container = container
    yield
    await container.trakt_client().close()
    await store.close()


app = FastAPI(title="Trakt Proxy", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["x-cache", "x-proxied-by"],
)

# Routes
app.include_router(health_router)
app.include_router(proxy_router)
