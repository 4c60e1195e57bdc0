"""
Routes du proxy Trakt.

- /api/trakt/{path} : relais direct, jamais mis en cache
- /api/trakt-new/{path} : relais avec cache-aside (header x-cache HIT/MISS)

Les erreurs de configuration renvoient 500, les échecs amont 502.
"""

import json
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from loguru import logger

from ...config import ConfigurationError
from ...core.ports.api_clients import UpstreamError
from ...services.proxy import ProxyRequest, ProxyResponse, ProxyService
from ..deps import get_proxy_service

router = APIRouter()

_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]
PROXY_HEADER = "x-proxied-by"
PROXY_NAME = "trakt-proxy"
CACHE_HEADER = "x-cache"


class InvalidBodyError(Exception):
    """Corps de requête non JSON."""


async def _build_request(request: Request, path: str) -> ProxyRequest:
    """Convertit la requête FastAPI en ProxyRequest."""
    body = None
    if request.method != "GET":
        raw = await request.body()
        if raw:
            try:
                body = json.loads(raw)
            except ValueError as e:
                raise InvalidBodyError(str(e)) from e
    return ProxyRequest(
        method=request.method,
        path="/" + path,
        query=dict(request.query_params),
        body=body,
    )


def _to_response(result: ProxyResponse) -> Response:
    headers = {**result.headers, PROXY_HEADER: PROXY_NAME}
    if result.cache_status is not None:
        headers[CACHE_HEADER] = result.cache_status.value
    if result.body is None:
        return Response(status_code=result.status_code, headers=headers)
    return JSONResponse(content=result.body, status_code=result.status_code, headers=headers)


async def _dispatch(
    handler: Callable[[ProxyRequest], Awaitable[ProxyResponse]],
    request: Request,
    path: str,
) -> Response:
    try:
        proxy_request = await _build_request(request, path)
        result = await handler(proxy_request)
    except InvalidBodyError:
        return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})
    except ConfigurationError as e:
        logger.error(f"Proxy non configure: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})
    except UpstreamError as e:
        logger.error(f"Erreur proxy sur /{path}: {e}")
        return JSONResponse(
            status_code=502,
            content={"error": "Upstream request failed", "detail": str(e)},
        )
    return _to_response(result)


@router.api_route("/api/trakt/{path:path}", methods=_METHODS)
async def trakt_passthrough(
    path: str,
    request: Request,
    proxy: ProxyService = Depends(get_proxy_service),
) -> Response:
    """Relais direct vers Trakt."""
    return await _dispatch(proxy.passthrough, request, path)


@router.api_route("/api/trakt-new/{path:path}", methods=_METHODS)
async def trakt_cached(
    path: str,
    request: Request,
    proxy: ProxyService = Depends(get_proxy_service),
) -> Response:
    """Relais vers Trakt avec cache."""
    return await _dispatch(proxy.handle, request, path)
