"""ASGI wiring: reject protected debug routes before they are dispatched."""

from __future__ import annotations

from typing import Awaitable, Callable, Iterable

from fastapi.responses import PlainTextResponse
from starlette.requests import Request
from starlette.responses import Response

from devgate.config.settings import settings
from devgate.core.context import RequestContext
from devgate.core.gate import DebugAccessGate
from devgate.util.logger import get_logger


logger = get_logger("front_controller")

CallNext = Callable[[Request], Awaitable[Response]]


def _under_prefix(path: str, prefix: str) -> bool:
    base = prefix.rstrip("/")
    return path == base or path.startswith(base + "/")


def build_debug_gate_middleware(
    gate: DebugAccessGate,
    protected_prefixes: Iterable[str] | None = None,
) -> Callable[[Request, CallNext], Awaitable[Response]]:
    """Return an ``@app.middleware("http")`` compatible guard for ``gate``."""
    prefixes = tuple(protected_prefixes if protected_prefixes is not None else settings.protected_path_prefixes)

    async def debug_gate_middleware(request: Request, call_next: CallNext) -> Response:
        path = request.url.path
        if not any(_under_prefix(path, prefix) for prefix in prefixes):
            return await call_next(request)

        if not gate.is_accessible(RequestContext.from_request(request)):
            logger.debug("debug route blocked path=%s", path)
            return PlainTextResponse(gate.forbidden_message(), status_code=403)
        return await call_next(request)

    return debug_gate_middleware
