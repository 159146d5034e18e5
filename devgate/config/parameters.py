"""Loader for the debug front controller security parameters (parameters.yml).

Expected layout::

    parameters:
        app_dev_security_disable: false
        app_dev_security_allow_http_client_ip: false
        app_dev_security_allow_http_x_forwarded_for: false
        app_dev_security_disallowed_php_sapi_names: [cli-server]
        app_dev_security_allowed_remote_addr: [127.0.0.1, "fe80::1", "::1"]

A missing or malformed file never fails a request: ``load`` falls back to the
defaults below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from devgate.core.errors import ConfigNotFoundError, ConfigParseError
from devgate.util.logger import get_logger


logger = get_logger("parameters")

PARAMETERS_FILE = "parameters.yml"

KEY_DISABLE = "app_dev_security_disable"
KEY_ALLOW_HTTP_CLIENT_IP = "app_dev_security_allow_http_client_ip"
KEY_ALLOW_HTTP_X_FORWARDED_FOR = "app_dev_security_allow_http_x_forwarded_for"
KEY_DISALLOWED_SAPI_NAMES = "app_dev_security_disallowed_php_sapi_names"
KEY_ALLOWED_REMOTE_ADDR = "app_dev_security_allowed_remote_addr"

DEFAULT_DISALLOWED_SAPI_NAMES = frozenset({"cli-server"})
DEFAULT_ALLOWED_REMOTE_ADDRS = frozenset({"127.0.0.1", "fe80::1", "::1"})

_TRUE_LITERALS = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class AccessSettings:
    security_disabled: bool = False
    allow_http_client_ip: bool = False
    allow_http_x_forwarded_for: bool = False
    disallowed_sapi_names: frozenset[str] = field(default=DEFAULT_DISALLOWED_SAPI_NAMES)
    allowed_remote_addrs: frozenset[str] = field(default=DEFAULT_ALLOWED_REMOTE_ADDRS)


def parse_loose_bool(value: Any) -> bool:
    """Coerce a config scalar to bool.

    ``True`` for ``True``, the number 1 and the strings "1", "true", "yes",
    "on" (case-insensitive, surrounding whitespace ignored). Everything else
    is ``False``.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_LITERALS
    return False


def _string_set(value: Any) -> frozenset[str] | None:
    if isinstance(value, Mapping):
        value = list(value.values())
    if not isinstance(value, (list, tuple)):
        return None
    return frozenset(str(item) for item in value if item is not None)


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError as exc:
        raise ConfigNotFoundError(f"cannot access {path}: {exc}") from exc


def locate(filename: str, search_dirs: Iterable[str | Path]) -> Path:
    """Return the first existing ``filename`` under ``search_dirs``."""
    candidate = Path(filename)
    if candidate.is_absolute():
        if _is_file(candidate):
            return candidate
        raise ConfigNotFoundError(f"file does not exist: {candidate}")

    searched: list[str] = []
    for directory in search_dirs:
        path = Path(directory) / candidate
        if _is_file(path):
            return path
        searched.append(str(directory))
    raise ConfigNotFoundError(f"file {filename!r} not found in directories: {', '.join(searched) or '-'}")


def read_parameters_file(path: str | Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigNotFoundError(f"cannot read parameters file {path}: {exc}") from exc


def parse_parameters(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except (yaml.YAMLError, RecursionError) as exc:
        raise ConfigParseError(f"invalid parameters yaml: {exc}") from exc


def read_parameters(config_dir: str | Path, filename: str = PARAMETERS_FILE) -> dict[str, Any]:
    """Locate, read and parse the parameters file, returning its ``parameters`` mapping.

    Raises ``ConfigNotFoundError`` / ``ConfigParseError``. A document without a
    top-level ``parameters`` mapping yields an empty dict.
    """
    path = locate(filename, [config_dir])
    document = parse_parameters(read_parameters_file(path))
    if not isinstance(document, dict):
        return {}
    parameters = document.get("parameters")
    if not isinstance(parameters, dict):
        return {}
    return parameters


def settings_from_parameters(parameters: dict[str, Any]) -> AccessSettings:
    if parameters.get(KEY_DISABLE) is not None and parse_loose_bool(parameters[KEY_DISABLE]):
        # disabling wins; the remaining keys are not consulted
        return AccessSettings(security_disabled=True)

    overrides: dict[str, Any] = {}
    if parameters.get(KEY_ALLOW_HTTP_CLIENT_IP) is not None:
        overrides["allow_http_client_ip"] = parse_loose_bool(parameters[KEY_ALLOW_HTTP_CLIENT_IP])
    if parameters.get(KEY_ALLOW_HTTP_X_FORWARDED_FOR) is not None:
        overrides["allow_http_x_forwarded_for"] = parse_loose_bool(parameters[KEY_ALLOW_HTTP_X_FORWARDED_FOR])

    sapi_names = _string_set(parameters.get(KEY_DISALLOWED_SAPI_NAMES))
    if sapi_names is not None:
        overrides["disallowed_sapi_names"] = sapi_names
    elif parameters.get(KEY_DISALLOWED_SAPI_NAMES) is not None:
        logger.warning("ignoring %s: expected a list or mapping", KEY_DISALLOWED_SAPI_NAMES)

    remote_addrs = _string_set(parameters.get(KEY_ALLOWED_REMOTE_ADDR))
    if remote_addrs is not None:
        overrides["allowed_remote_addrs"] = remote_addrs
    elif parameters.get(KEY_ALLOWED_REMOTE_ADDR) is not None:
        logger.warning("ignoring %s: expected a list or mapping", KEY_ALLOWED_REMOTE_ADDR)

    return AccessSettings(**overrides)


def load(config_dir: str | Path, filename: str = PARAMETERS_FILE) -> AccessSettings:
    """Load access settings from ``config_dir``; defaults when the file is missing or malformed."""
    try:
        parameters = read_parameters(config_dir, filename)
    except ConfigNotFoundError as exc:
        logger.debug("parameters file unavailable, using defaults dir=%s reason=%s", config_dir, exc)
        return AccessSettings()
    except ConfigParseError as exc:
        logger.warning("parameters file malformed, using defaults dir=%s reason=%s", config_dir, exc)
        return AccessSettings()

    loaded = settings_from_parameters(parameters)
    logger.info(
        "access settings loaded dir=%s disabled=%s allow_client_ip=%s allow_x_forwarded_for=%s",
        config_dir,
        loaded.security_disabled,
        loaded.allow_http_client_ip,
        loaded.allow_http_x_forwarded_for,
    )
    return loaded
