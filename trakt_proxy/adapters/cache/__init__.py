"""
Magasins de cache implementant ICacheStore.

- DiskCacheStore: repertoire diskcache local (defaut)
- MongoCacheStore: collection MongoDB "cache" partagee
"""

from trakt_proxy.adapters.cache.disk_store import DiskCacheStore
from trakt_proxy.adapters.cache.mongo_store import MongoCacheStore

__all__ = [
    "DiskCacheStore",
    "MongoCacheStore",
]
