"""
Client Trakt pour le relais des requetes du proxy.

Implemente l'interface IUpstreamClient pour l'API Trakt. Le client ne
connait pas le cache : il relaie une requete et decode la reponse JSON.
Le mecanisme de retry gere le rate limiting (429).

Usage:
    client = TraktClient(client_id="your_id", base_url="https://api.trakt.tv")
    response = await client.request("GET", "/movies/trending", {"limit": "20"})
    images = await client.fetch_images("/movies/tron-legacy-2010")
    await client.close()
"""

from typing import Any, Optional

import httpx

from trakt_proxy.adapters.api.retry import request_with_retry
from trakt_proxy.core.ports.api_clients import IUpstreamClient, UpstreamError, UpstreamResponse

# Headers de pagination Trakt relayes au client du proxy
_FORWARDED_HEADER_PREFIX = "x-pagination-"


class TraktClient(IUpstreamClient):
    """
    Client API Trakt.

    Implemente IUpstreamClient avec:
    - Relais generique (toutes methodes, body JSON hors GET)
    - Recuperation de la representation etendue avec images
    - Retry automatique sur rate limiting (429)

    Attributes:
        TRAKT_BASE_URL: URL de base par defaut de l'API Trakt
        IMAGES_QUERY: Parametres demandant la representation avec images

    Example:
        client = TraktClient(client_id="xxx")
        response = await client.request("GET", "/movies/1")
        if response.ok:
            print(response.data["title"])
        await client.close()
    """

    TRAKT_BASE_URL = "https://api.trakt.tv"
    IMAGES_QUERY = {"extended": "images"}

    def __init__(
        self,
        client_id: Optional[str],
        base_url: str = TRAKT_BASE_URL,
        api_version: str = "2",
        timeout: Optional[float] = None,
        max_attempts: int = 3,
    ) -> None:
        """
        Initialise le client Trakt.

        Args:
            client_id: Cle client Trakt (header trakt-api-key), None si non configuree
            base_url: URL de base de l'API
            api_version: Version d'API (header trakt-api-version)
            timeout: Timeout reseau en secondes, None pour aucun
            max_attempts: Nombre de tentatives sur reponse 429
        """
        self._client_id = client_id
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, le cree si necessaire (lazy init).

        Returns:
            httpx.AsyncClient configure pour l'API Trakt
        """
        if self._client is None or self._client.is_closed:
            headers = {
                "Content-Type": "application/json",
                "trakt-api-key": self._client_id or "",
                "trakt-api-version": self._api_version,
            }
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=httpx.Timeout(self._timeout),
            )
        return self._client

    @property
    def is_configured(self) -> bool:
        """Vrai si la cle client Trakt est definie."""
        return bool(self._client_id)

    async def request(
        self,
        method: str,
        path: str,
        query: Optional[dict[str, str]] = None,
        body: Any = None,
    ) -> UpstreamResponse:
        """
        Relaie une requete vers Trakt et decode la reponse.

        Args:
            method: Methode HTTP
            path: Chemin relatif (ex: /shows/popular)
            query: Parametres de requete
            body: Corps JSON, envoye uniquement hors GET

        Returns:
            UpstreamResponse avec le code HTTP d'origine

        Raises:
            UpstreamError: Erreur reseau ou corps JSON invalide
        """
        return await self._send(method, path, query, body, self._max_attempts)

    async def _send(
        self,
        method: str,
        path: str,
        query: Optional[dict[str, str]],
        body: Any,
        max_attempts: int,
    ) -> UpstreamResponse:
        method = method.upper()
        kwargs: dict[str, Any] = {}
        if query:
            kwargs["params"] = query
        if method != "GET" and body is not None:
            kwargs["json"] = body

        client = self._get_client()
        try:
            response = await request_with_retry(
                client, method, path, max_attempts=max_attempts, **kwargs
            )
        except httpx.HTTPError as e:
            raise UpstreamError(str(e) or e.__class__.__name__) from e

        data = None
        if response.content:
            try:
                data = response.json()
            except ValueError as e:
                raise UpstreamError(
                    f"Reponse JSON invalide de Trakt (HTTP {response.status_code})"
                ) from e

        headers = {
            key.lower(): value
            for key, value in response.headers.items()
            if key.lower().startswith(_FORWARDED_HEADER_PREFIX)
        }
        return UpstreamResponse(status_code=response.status_code, data=data, headers=headers)

    async def fetch_images(self, path: str) -> UpstreamResponse:
        """
        Recupere la representation etendue avec images d'un chemin de detail.

        La query d'origine est remplacee par extended=images. Une seule
        tentative : un 429 n'est pas relance, l'enrichissement est abandonne.
        """
        return await self._send("GET", path, dict(self.IMAGES_QUERY), None, max_attempts=1)

    async def close(self) -> None:
        """
        Ferme le client HTTP.

        Doit etre appele a l'arret de l'application pour liberer
        les ressources reseau.
        """
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
