"""
Relance des requetes Trakt limitees en debit (HTTP 429).

Trakt renvoie un header Retry-After avec chaque 429 : il est respecte
tant qu'il ne depasse pas le delai maximum, sinon un backoff exponentiel
avec jitter prend le relais. Une fois les tentatives epuisees, la derniere
reponse 429 est relayee au client du proxy, jamais levee.

Usage:
    response = await request_with_retry(client, "GET", "/movies/trending", max_attempts=3)
"""

from typing import Optional

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)


class RateLimitError(Exception):
    """
    Reponse 429 convertie en exception pour declencher une relance.

    Attributes:
        retry_after: Delai demande par Trakt en secondes, None si absent
        response: Reponse 429 d'origine
    """

    def __init__(
        self,
        retry_after: Optional[int] = None,
        response: Optional[httpx.Response] = None,
    ) -> None:
        self.retry_after = retry_after
        self.response = response
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


def parse_retry_after(response: httpx.Response) -> Optional[int]:
    """Lit le header Retry-After (en secondes entieres uniquement)."""
    header = response.headers.get("Retry-After", "").strip()
    if header.isdigit():
        return int(header)
    return None


class wait_retry_after:
    """
    Strategie d'attente tenacity : Retry-After, sinon backoff exponentiel.

    Le delai demande par Trakt est plafonne a max_wait.
    """

    def __init__(self, max_wait: float) -> None:
        self._max_wait = max_wait
        self._fallback = wait_random_exponential(multiplier=1, min=1, max=max_wait)

    def __call__(self, retry_state: RetryCallState) -> float:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            return min(float(error.retry_after), self._max_wait)
        return self._fallback(retry_state)


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 3,
    max_wait: float = 60,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete en relancant les reponses 429.

    Les erreurs reseau (httpx.HTTPError) ne sont pas relancees et
    remontent immediatement ; les autres codes HTTP sont retournes tels quels.

    Args:
        client: Client httpx async
        method: Methode HTTP
        url: Chemin relatif a base_url
        max_attempts: Nombre total de tentatives
        max_wait: Attente maximale entre deux tentatives (secondes)
        **kwargs: Arguments passes a client.request()

    Returns:
        La premiere reponse non-429, ou la derniere 429 si les tentatives sont epuisees
    """
    retrying = AsyncRetrying(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_retry_after(max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )
    try:
        async for attempt in retrying:
            with attempt:
                response = await client.request(method, url, **kwargs)
                if response.status_code == 429:
                    raise RateLimitError(parse_retry_after(response), response)
    except RateLimitError as e:
        logger.warning(f"Rate limit Trakt persistant apres {max_attempts} tentatives: {url}")
        return e.response
    return response
