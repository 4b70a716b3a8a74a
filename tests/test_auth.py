"""Tests for API key middleware on the HTTP transport."""

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from app.core import auth
from app.core.auth import APIKeyMiddleware


async def ok(request):
    return PlainTextResponse("ok")


def make_app(api_key=None):
    return Starlette(
        routes=[Route("/mcp", ok), Route("/health", ok)],
        middleware=[Middleware(APIKeyMiddleware, api_key=api_key)],
    )


@pytest.fixture
def no_secret(monkeypatch):
    monkeypatch.delenv("MCP_API_KEY", raising=False)
    monkeypatch.setattr(auth, "get_secret_sync", lambda secret_id: None)


def test_health_is_public():
    client = TestClient(make_app("secret"))
    assert client.get("/health").status_code == 200


def test_missing_key_rejected():
    client = TestClient(make_app("secret"))
    response = client.get("/mcp")
    assert response.status_code == 401
    assert "Unauthorized" in response.text


@pytest.mark.parametrize("kwargs", [
    {"params": {"api_key": "secret"}},
    {"headers": {"X-API-Key": "secret"}},
    {"headers": {"Authorization": "Bearer secret"}},
])
def test_key_accepted(kwargs):
    client = TestClient(make_app("secret"))
    assert client.get("/mcp", **kwargs).status_code == 200


def test_wrong_key_rejected():
    client = TestClient(make_app("secret"))
    assert client.get("/mcp", headers={"X-API-Key": "nope"}).status_code == 401


def test_key_from_environment(monkeypatch):
    monkeypatch.setenv("MCP_API_KEY", "env-key")
    client = TestClient(make_app())
    assert client.get("/mcp").status_code == 401
    assert client.get("/mcp", headers={"X-API-Key": "env-key"}).status_code == 200


def test_unprotected_without_key(no_secret):
    client = TestClient(make_app())
    assert client.get("/mcp").status_code == 200
