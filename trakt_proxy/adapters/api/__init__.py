"""
Client de l'API amont (Trakt).

- TraktClient: relais httpx vers l'API Trakt
- request_with_retry: relance des 429 en respectant Retry-After

Le client implemente IUpstreamClient defini dans core/ports/api_clients.py.
"""

from trakt_proxy.adapters.api.retry import RateLimitError, request_with_retry
from trakt_proxy.adapters.api.trakt_client import TraktClient

__all__ = [
    "RateLimitError",
    "TraktClient",
    "request_with_retry",
]
