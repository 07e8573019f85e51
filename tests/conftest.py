"""
pytest configuration for the SORACOM MCP server tests.

Adds src directory to Python path for imports and provides a fake SORACOM
API served by aiohttp's TestServer for end-to-end transport tests.
"""

import itertools
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from core.auth.token_cache import TokenCache  # noqa: E402
from soracom_mcp.client.models import AuthCredentials, Coverage  # noqa: E402
from soracom_mcp.client.registry import ClientRegistry  # noqa: E402

OPERATOR_ID = "OP0123456789"


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: dict[str, str]
    headers: dict[str, str]
    body: Any = None


@dataclass
class FakeSoracomApi:
    """
    In-process stand-in for the SORACOM REST API.

    Issues sequential tokens (token-1, token-2 ...) and accepts only tokens
    it has issued and not revoked.

    Knobs:
        fail_auth: /auth answers 401
        fail_logout: /auth/logout answers 500
        always_401: every authenticated call answers 401
        responses: canned bodies by path (without the /v1 prefix)
    """

    operator_id: str = OPERATOR_ID
    fail_auth: bool = False
    fail_logout: bool = False
    always_401: bool = False
    responses: dict[str, Any] = field(default_factory=dict)

    auth_calls: int = 0
    logout_calls: int = 0
    auth_bodies: list[Any] = field(default_factory=list)
    requests: list[RecordedRequest] = field(default_factory=list)
    valid_tokens: set[str] = field(default_factory=set)
    _counter: Any = field(default_factory=lambda: itertools.count(1))

    def revoke_tokens(self) -> None:
        self.valid_tokens.clear()

    def calls_to(self, path: str) -> list[RecordedRequest]:
        return [r for r in self.requests if r.path == path]

    def _authorized(self, request: web.Request) -> bool:
        if self.always_401:
            return False
        return request.headers.get("X-Soracom-Token") in self.valid_tokens

    async def handle(self, request: web.Request) -> web.StreamResponse:
        path = "/" + request.match_info["tail"]
        body = None
        if request.can_read_body:
            body = await request.json()
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=path,
                query=dict(request.query),
                headers=dict(request.headers),
                body=body,
            )
        )

        if path == "/auth" and request.method == "POST":
            self.auth_calls += 1
            self.auth_bodies.append(body)
            if self.fail_auth:
                return web.json_response(
                    {"code": "AUT0001", "message": "Invalid credentials"}, status=401
                )
            n = next(self._counter)
            token = f"token-{n}"
            self.valid_tokens.add(token)
            return web.json_response(
                {"apiKey": f"api-key-{n}", "token": token, "operatorId": self.operator_id}
            )

        if not self._authorized(request):
            return web.json_response(
                {"code": "AUT0002", "message": "Invalid token"}, status=401
            )

        if path == "/auth/logout":
            self.logout_calls += 1
            if self.fail_logout:
                return web.json_response({"message": "Logout unavailable"}, status=500)
            self.valid_tokens.discard(request.headers.get("X-Soracom-Token"))
            return web.Response(status=200)

        if path == "/cell_locations" and path not in self.responses:
            return web.json_response(
                [{"lat": 35.0, "lon": 139.0, **item} for item in body or []]
            )

        if path in self.responses:
            response = self.responses[path]
            if isinstance(response, web.StreamResponse):
                return response
            return web.json_response(response)

        return web.json_response({"message": f"No such resource: {path}"}, status=404)

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_route("*", "/v1/{tail:.*}", self.handle)
        return app


@pytest.fixture
def fake_api() -> FakeSoracomApi:
    return FakeSoracomApi()


@pytest.fixture
async def api_server(fake_api):
    server = TestServer(fake_api.make_app())
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def base_url(api_server) -> str:
    return str(api_server.make_url("/v1"))


@pytest.fixture
def credentials() -> AuthCredentials:
    return AuthCredentials("K1", "S1")


@pytest.fixture
def token_cache() -> TokenCache:
    return TokenCache()


@pytest.fixture
async def registry(token_cache, base_url):
    """Registry with both coverage types pointed at the fake API."""
    registry = ClientRegistry(
        token_cache,
        endpoints={Coverage.JP: base_url, Coverage.GLOBAL: base_url},
        timeout_seconds=5,
    )
    yield registry
    await registry.dispose_all()
