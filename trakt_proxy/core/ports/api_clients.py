"""
Interfaces ports pour le client de l'API amont.

Interface abstraite (port) définissant le contrat d'accès à l'API de
métadonnées relayée par le proxy. L'implémentation concrète (adaptateur)
est le client Trakt basé sur httpx.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


class UpstreamError(Exception):
    """
    Exception levée quand l'appel amont échoue (réseau, JSON invalide).

    Les réponses HTTP non-2xx ne sont PAS des erreurs : elles sont relayées
    telles quelles au client du proxy.
    """


@dataclass
class UpstreamResponse:
    """
    Réponse décodée de l'API amont.

    Attributs :
        status_code : Code HTTP renvoyé par l'API
        data : Corps JSON décodé (None si réponse vide)
        headers : Headers de pagination utiles au client (X-Pagination-*)
    """

    status_code: int
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Vrai pour un code 2xx."""
        return 200 <= self.status_code < 300


class IUpstreamClient(ABC):
    """
    Interface du client vers l'API de métadonnées amont.

    Toutes les méthodes sont des points de suspension asynchrones ;
    aucune ne lève pour un code HTTP non-2xx.
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Vrai si les identifiants amont sont disponibles."""
        ...

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        query: Optional[dict[str, str]] = None,
        body: Any = None,
    ) -> UpstreamResponse:
        """
        Relaie une requête vers l'API amont.

        Args :
            method : Méthode HTTP (GET, POST, ...)
            path : Chemin relatif à l'URL de base (ex: /movies/trending)
            query : Paramètres de requête
            body : Corps JSON (ignoré pour GET)

        Raises :
            UpstreamError : Échec réseau ou corps non décodable
        """
        ...

    @abstractmethod
    async def fetch_images(self, path: str) -> UpstreamResponse:
        """Récupère la représentation étendue avec images d'un chemin de détail."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Libère les ressources réseau."""
        ...
