"""Debug front controller access rules."""

from __future__ import annotations

from devgate.config.parameters import AccessSettings
from devgate.core.context import RequestContext


FORBIDDEN_MESSAGE = "You are not allowed to access this file."
FORBIDDEN_STATUS_LINE = "HTTP/1.0 403 Forbidden"


def deny_reason(settings: AccessSettings, ctx: RequestContext) -> str | None:
    """Return why ``ctx`` must be rejected, or None when it may be served.

    Guards run in order and the first failing one wins: proxy headers are
    rejected before the remote address is trusted, and the sapi check runs
    last so a dev server is refused even for allowlisted callers.
    """
    if settings.security_disabled:
        return None
    if ctx.has_client_ip_header and not settings.allow_http_client_ip:
        return "http_client_ip_present"
    if ctx.has_x_forwarded_for_header and not settings.allow_http_x_forwarded_for:
        return "http_x_forwarded_for_present"
    if ctx.remote_addr is None or ctx.remote_addr not in settings.allowed_remote_addrs:
        return "remote_addr_not_allowed"
    if ctx.sapi_name in settings.disallowed_sapi_names:
        return "sapi_name_disallowed"
    return None


def is_accessible(settings: AccessSettings, ctx: RequestContext) -> bool:
    return deny_reason(settings, ctx) is None
