"""
Ports (interfaces abstraites) du domaine.

- api_clients : contrat du client vers l'API amont (Trakt)
- cache_store : contrat du magasin de cache cle/document
"""

from trakt_proxy.core.ports.api_clients import IUpstreamClient, UpstreamError, UpstreamResponse
from trakt_proxy.core.ports.cache_store import ICacheStore

__all__ = [
    "ICacheStore",
    "IUpstreamClient",
    "UpstreamError",
    "UpstreamResponse",
]
