"""
Shared fixtures: a fake DigitalOcean API served through httpx.MockTransport
and helpers that call tools/resources on an in-memory FastMCP server.
"""

import json

import httpx
import pytest
from fastmcp import Client

from app.core.digitalocean import DigitalOceanClient
from server import create_server

NOT_FOUND = {"id": "not_found", "message": "The resource you were accessing could not be found."}


class FakeDigitalOcean:
    """Records requests and answers them from registered routes."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method: str, path: str, status: int = 200, json_body=None, headers=None):
        self.routes.setdefault((method.upper(), path), []).append((status, json_body, headers or {}))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/v2"):
            path = path[len("/v2"):]
        responses = self.routes.get((request.method, path))
        if not responses:
            return httpx.Response(404, json=NOT_FOUND)
        # Replay queued responses in order; the last one repeats
        status, body, headers = responses.pop(0) if len(responses) > 1 else responses[0]
        if body is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last_request.content)


@pytest.fixture
def fake_api():
    return FakeDigitalOcean()


@pytest.fixture
def do_client(fake_api):
    return DigitalOceanClient("test-token", transport=httpx.MockTransport(fake_api.handler), max_retries=0)


@pytest.fixture
def mcp_server(do_client):
    return create_server(do_client)


@pytest.fixture
def call_tool(mcp_server):
    async def _call(name, arguments=None):
        async with Client(mcp_server) as client:
            return await client.call_tool_mcp(name, arguments or {})
    return _call


@pytest.fixture
def read_resource(mcp_server):
    async def _read(uri):
        async with Client(mcp_server) as client:
            contents = await client.read_resource(uri)
            return contents[0].text
    return _read
