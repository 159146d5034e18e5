import pytest
from fastapi.responses import JSONResponse
from starlette.requests import Request

from devgate.core.context import RequestContext
from devgate.core.front_controller import build_debug_gate_middleware
from devgate.core.gate import DebugAccessGate


def _build_request(path: str, *, client_host: str = "127.0.0.1", headers: dict[str, str] | None = None) -> Request:
    raw_headers = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": b"",
        "headers": raw_headers,
        "client": (client_host, 50000),
        "server": ("127.0.0.1", 8000),
    }
    return Request(scope)


async def _allow_next(_request: Request):
    return JSONResponse(status_code=200, content={"ok": True})


@pytest.fixture
def gate(tmp_path) -> DebugAccessGate:
    return DebugAccessGate(config_dir=tmp_path, context=RequestContext())


@pytest.mark.asyncio
async def test_middleware_blocks_public_caller_on_debug_route(gate):
    middleware = build_debug_gate_middleware(gate, ["/_debug"])
    response = await middleware(_build_request("/_debug/profiler", client_host="8.8.8.8"), _allow_next)
    assert response.status_code == 403
    assert response.body.decode("utf-8") == "You are not allowed to access this file."


@pytest.mark.asyncio
async def test_middleware_blocks_forwarded_request_from_loopback(gate):
    middleware = build_debug_gate_middleware(gate, ["/_debug"])
    request = _build_request("/_debug", headers={"X-Forwarded-For": "8.8.8.8"})
    response = await middleware(request, _allow_next)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_middleware_allows_loopback_caller(gate):
    middleware = build_debug_gate_middleware(gate, ["/_debug"])
    response = await middleware(_build_request("/_debug"), _allow_next)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_middleware_ignores_unprotected_paths(gate):
    middleware = build_debug_gate_middleware(gate, ["/_debug"])
    response = await middleware(_build_request("/health", client_host="8.8.8.8"), _allow_next)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_middleware_matches_prefix_on_path_segments(gate):
    middleware = build_debug_gate_middleware(gate, ["/_debug/"])
    blocked = await middleware(_build_request("/_debug", client_host="8.8.8.8"), _allow_next)
    nested = await middleware(_build_request("/_debug/routes", client_host="8.8.8.8"), _allow_next)
    sibling = await middleware(_build_request("/_debugger", client_host="8.8.8.8"), _allow_next)
    assert blocked.status_code == 403
    assert nested.status_code == 403
    assert sibling.status_code == 200
