"""
Business entities representing core domain concepts.

Exports:
- CacheEntry: A stored cache document with its timestamps
- CacheStatus: HIT / MISS marker returned to clients
- MediaKind: movie / show, derived from the request path
"""

from trakt_proxy.core.entities.cache import CacheEntry, CacheStatus, MediaKind, utc_now

__all__ = [
    "CacheEntry",
    "CacheStatus",
    "MediaKind",
    "utc_now",
]
