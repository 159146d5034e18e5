"""Gatekeeper for debug front controllers deployed to production servers.

Typical use at the top of a debug entry point::

    gate = DebugAccessGate()
    if not gate.is_accessible():
        start_response(gate.forbidden_status_line(), ...)
        return [gate.forbidden_message().encode()]
"""

from __future__ import annotations

import os
from pathlib import Path

from devgate.config import parameters
from devgate.config.parameters import AccessSettings
from devgate.config.settings import settings as runtime_settings
from devgate.core.access import FORBIDDEN_MESSAGE, FORBIDDEN_STATUS_LINE, deny_reason
from devgate.core.context import RequestContext
from devgate.util.logger import get_logger


logger = get_logger("gate")

_APP_ROOT_DIR = Path(__file__).resolve().parents[2]


def resolve_config_dir(path_str: str) -> Path:
    path = Path(path_str)
    if path.is_absolute():
        return path
    candidates = [Path.cwd() / path, _APP_ROOT_DIR / path]
    for candidate in candidates:
        try:
            if candidate.exists():
                return candidate.resolve()
        except OSError:
            continue
    return candidates[-1].resolve()


class DebugAccessGate:
    def __init__(self, config_dir: str | Path | None = None, context: RequestContext | None = None) -> None:
        self.config_dir = Path(config_dir) if config_dir is not None else resolve_config_dir(runtime_settings.config_dir)
        self._context = context if context is not None else RequestContext.from_environ(os.environ)
        self._settings = parameters.load(self.config_dir, runtime_settings.parameters_file)

    @property
    def settings(self) -> AccessSettings:
        return self._settings

    @property
    def context(self) -> RequestContext:
        return self._context

    def is_accessible(self, context: RequestContext | None = None) -> bool:
        ctx = context if context is not None else self._context
        reason = deny_reason(self._settings, ctx)
        if reason is None:
            return True
        logger.warning(
            "debug access denied reason=%s remote_addr=%s sapi=%s",
            reason,
            ctx.remote_addr or "-",
            ctx.sapi_name or "-",
        )
        return False

    def forbidden_message(self) -> str:
        return FORBIDDEN_MESSAGE

    def forbidden_status_line(self) -> str:
        return FORBIDDEN_STATUS_LINE
