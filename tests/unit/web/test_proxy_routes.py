"""
Tests des routes web du proxy.

Le ProxyService est remplace via dependency_overrides : ces tests
verifient la traduction HTTP (headers, codes d'erreur, corps JSON).
Le lifespan n'est pas execute (TestClient hors bloc with).
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from trakt_proxy import __version__
from trakt_proxy.config import ConfigurationError
from trakt_proxy.core.entities.cache import CacheStatus
from trakt_proxy.core.ports.api_clients import UpstreamError
from trakt_proxy.services.proxy import ProxyRequest, ProxyResponse
from trakt_proxy.web.app import app
from trakt_proxy.web.deps import get_cache_store, get_proxy_service


@pytest.fixture
def mock_proxy():
    proxy = MagicMock()
    proxy.handle = AsyncMock(
        return_value=ProxyResponse(200, {"title": "TRON: Legacy"}, CacheStatus.HIT)
    )
    proxy.passthrough = AsyncMock(
        return_value=ProxyResponse(200, [{"id": 1}], headers={"x-pagination-page": "1"})
    )
    return proxy


@pytest.fixture
def mock_store():
    store = MagicMock()
    store.is_available = True
    return store


@pytest.fixture
def client(mock_proxy, mock_store):
    app.dependency_overrides[get_proxy_service] = lambda: mock_proxy
    app.dependency_overrides[get_cache_store] = lambda: mock_store
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestCachedRoute:
    """Tests de /api/trakt-new/{path}."""

    def test_hit_sets_cache_headers(self, client, mock_proxy):
        resp = client.get("/api/trakt-new/movies/tron-legacy-2010")

        assert resp.status_code == 200
        assert resp.json() == {"title": "TRON: Legacy"}
        assert resp.headers["x-cache"] == "HIT"
        assert resp.headers["x-proxied-by"] == "trakt-proxy"
        mock_proxy.handle.assert_awaited_once_with(
            ProxyRequest(method="GET", path="/movies/tron-legacy-2010", query={}, body=None)
        )

    def test_query_params_are_forwarded(self, client, mock_proxy):
        client.get("/api/trakt-new/search/movie", params={"query": "tron", "limit": "5"})

        request = mock_proxy.handle.await_args.args[0]
        assert request.path == "/search/movie"
        assert request.query == {"query": "tron", "limit": "5"}

    def test_upstream_error_miss_is_served_as_200(self, client, mock_proxy):
        mock_proxy.handle.return_value = ProxyResponse(
            200, {"error": "not found"}, CacheStatus.MISS
        )

        resp = client.get("/api/trakt-new/movies/unknown")

        assert resp.status_code == 200
        assert resp.headers["x-cache"] == "MISS"
        assert resp.json() == {"error": "not found"}

    def test_post_body_is_decoded(self, client, mock_proxy):
        mock_proxy.handle.return_value = ProxyResponse(201, {"added": 1})

        resp = client.post("/api/trakt-new/sync/history", json={"movies": []})

        assert resp.status_code == 201
        assert "x-cache" not in resp.headers
        assert mock_proxy.handle.await_args.args[0].body == {"movies": []}

    def test_invalid_json_body_returns_400(self, client, mock_proxy):
        resp = client.post(
            "/api/trakt-new/sync/history",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        mock_proxy.handle.assert_not_awaited()

    def test_configuration_error_returns_500(self, client, mock_proxy):
        mock_proxy.handle.side_effect = ConfigurationError("TRAKT_CLIENT_ID not configured")

        resp = client.get("/api/trakt-new/movies/1")

        assert resp.status_code == 500
        assert resp.json() == {"error": "TRAKT_CLIENT_ID not configured"}

    def test_upstream_error_returns_502(self, client, mock_proxy):
        mock_proxy.handle.side_effect = UpstreamError("connection refused")

        resp = client.get("/api/trakt-new/movies/1")

        assert resp.status_code == 502
        assert resp.json()["error"] == "Upstream request failed"
        assert resp.json()["detail"] == "connection refused"

    def test_empty_body_response(self, client, mock_proxy):
        mock_proxy.handle.return_value = ProxyResponse(204)

        resp = client.delete("/api/trakt-new/users/me/lists/1")

        assert resp.status_code == 204
        assert resp.content == b""


class TestPassthroughRoute:
    """Tests de /api/trakt/{path}."""

    def test_passthrough_never_sets_cache_header(self, client, mock_proxy):
        resp = client.get("/api/trakt/movies/trending")

        assert resp.status_code == 200
        assert resp.json() == [{"id": 1}]
        assert "x-cache" not in resp.headers
        assert resp.headers["x-proxied-by"] == "trakt-proxy"
        assert resp.headers["x-pagination-page"] == "1"
        mock_proxy.passthrough.assert_awaited_once()
        mock_proxy.handle.assert_not_awaited()


class TestHealthRoute:
    """Tests de la route de sante."""

    def test_health_reports_cache_state(self, client, mock_store):
        resp = client.get("/")

        assert resp.status_code == 200
        data = resp.json()
        assert data["message"] == "Trakt API Proxy"
        assert data["version"] == __version__
        assert data["status"] == "running"
        assert data["cache"] == "available"

    def test_health_with_unavailable_cache(self, client, mock_store):
        mock_store.is_available = False

        assert client.get("/").json()["cache"] == "unavailable"
