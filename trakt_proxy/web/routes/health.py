"""
Route de santé du proxy.

Indique que le service tourne et si le cache est disponible.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ... import __version__
from ...core.ports.cache_store import ICacheStore
from ..deps import get_cache_store

router = APIRouter()


@router.get("/")
async def health(store: ICacheStore = Depends(get_cache_store)):
    """État du service."""
    return {
        "message": "Trakt API Proxy",
        "version": __version__,
        "status": "running",
        "cache": "available" if store.is_available else "unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
