"""Per-request snapshot consumed by the access evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from starlette.requests import Request

from devgate.config.settings import settings


@dataclass(frozen=True, slots=True)
class RequestContext:
    has_client_ip_header: bool = False
    has_x_forwarded_for_header: bool = False
    remote_addr: str | None = None
    sapi_name: str = ""

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any], sapi_name: str | None = None) -> RequestContext:
        """Build from a CGI/WSGI style environ (``HTTP_CLIENT_IP``, ``REMOTE_ADDR``...)."""
        remote_addr = environ.get("REMOTE_ADDR")
        return cls(
            has_client_ip_header=environ.get("HTTP_CLIENT_IP") is not None,
            has_x_forwarded_for_header=environ.get("HTTP_X_FORWARDED_FOR") is not None,
            remote_addr=str(remote_addr) if remote_addr is not None else None,
            sapi_name=settings.sapi_name if sapi_name is None else sapi_name,
        )

    @classmethod
    def from_request(cls, request: Request, sapi_name: str | None = None) -> RequestContext:
        return cls(
            has_client_ip_header="client-ip" in request.headers,
            has_x_forwarded_for_header="x-forwarded-for" in request.headers,
            remote_addr=request.client.host if request.client else None,
            sapi_name=settings.sapi_name if sapi_name is None else sapi_name,
        )
