"""Dry-run the debug access gate against a simulated request.

    python -m devgate.cli --config-dir app/config --remote-addr 10.0.0.7
"""

from __future__ import annotations

import argparse
import sys

from devgate.core.context import RequestContext
from devgate.core.gate import DebugAccessGate
from devgate.util.logger import set_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check whether a request may reach the debug front controller.")
    parser.add_argument("--config-dir", default=None, help="directory holding parameters.yml (default: DEVGATE_CONFIG_DIR)")
    parser.add_argument("--remote-addr", default=None, help="caller address; omitted means unknown")
    parser.add_argument("--client-ip", action="store_true", help="request carries a Client-IP header")
    parser.add_argument("--x-forwarded-for", action="store_true", help="request carries an X-Forwarded-For header")
    parser.add_argument("--sapi-name", default=None, help="execution mode of the serving runtime (default: DEVGATE_SAPI_NAME)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        set_level("debug")

    environ: dict[str, str] = {}
    if args.remote_addr is not None:
        environ["REMOTE_ADDR"] = args.remote_addr
    if args.client_ip:
        environ["HTTP_CLIENT_IP"] = "1"
    if args.x_forwarded_for:
        environ["HTTP_X_FORWARDED_FOR"] = "1"

    gate = DebugAccessGate(config_dir=args.config_dir, context=RequestContext.from_environ(environ, args.sapi_name))
    loaded = gate.settings
    print(f"config_dir: {gate.config_dir}")
    print(f"security_disabled: {loaded.security_disabled}")
    print(f"allow_http_client_ip: {loaded.allow_http_client_ip}")
    print(f"allow_http_x_forwarded_for: {loaded.allow_http_x_forwarded_for}")
    print(f"disallowed_sapi_names: {', '.join(sorted(loaded.disallowed_sapi_names)) or '-'}")
    print(f"allowed_remote_addrs: {', '.join(sorted(loaded.allowed_remote_addrs)) or '-'}")

    if gate.is_accessible():
        print("accessible")
        return 0
    print(gate.forbidden_status_line())
    print(gate.forbidden_message())
    return 1


if __name__ == "__main__":
    sys.exit(main())
