"""Command-line driver for the FRAM provider.

Runs single lifecycle calls (plan, apply, read, import, data) against the
configured platform, or starts the plugin server.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fram_provider import __version__
from fram_provider.config import load_settings
from fram_provider.framework import (
    Diagnostics,
    Plan,
    apply,
    import_resource,
    plan,
    read_data_source,
    read_resource,
)
from fram_provider.provider import FramProvider


def _load_document(path: Optional[str]) -> Any:
    """Read a YAML or JSON request document ('-' for stdin)."""
    if not path:
        return None
    if path == "-":
        return yaml.safe_load(sys.stdin)
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def _unwrap(document: Any, key: str) -> Any:
    if isinstance(document, dict) and key in document:
        return document[key]
    return document


def _report(diags: Diagnostics) -> int:
    for diag in diags:
        print(f"[fram] {diag}", file=sys.stderr)
    return 1 if diags.has_error() else 0


def _emit(payload: Any) -> None:
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")


def main(argv: Optional[list] = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="FRAM provider driver")
    parser.add_argument("--host", default=os.environ.get("FRAM_BASEURL"))
    parser.add_argument("--username", default=os.environ.get("FRAM_USERNAME"))
    parser.add_argument(
        "--password",
        default=None,
        help="AM password. Visible in process listings; prefer FRAM_PASSWORD or /run/secrets/fram_password, "
             "which are read when this flag is omitted.",
    )
    parser.add_argument("--realm", default=os.environ.get("FRAM_REALM"))
    parser.add_argument("--idm-host", default=os.environ.get("FRAM_IDM_HOST"))

    sub = parser.add_subparsers(dest="cmd")

    serve = sub.add_parser("serve", help="Run the plugin server")
    serve.add_argument("--listen-host", default=None)
    serve.add_argument("--listen-port", type=int, default=None)

    sub.add_parser("schema", help="Print provider, resource and data source schemas")

    sp = sub.add_parser("plan", help="Plan a resource change")
    sp.add_argument("--type", required=True, dest="type_name")
    sp.add_argument("--file", required=True, help="Document with 'prior_state' and 'config'")

    sa = sub.add_parser("apply", help="Apply a plan produced by 'plan'")
    sa.add_argument("--type", required=True, dest="type_name")
    sa.add_argument("--file", required=True)

    sr = sub.add_parser("read", help="Refresh resource state")
    sr.add_argument("--type", required=True, dest="type_name")
    sr.add_argument("--file", required=True)

    si = sub.add_parser("import", help="Import an existing object")
    si.add_argument("--type", required=True, dest="type_name")
    si.add_argument("--id", required=True, dest="import_id")

    sd = sub.add_parser("data", help="Read a data source")
    sd.add_argument("--type", required=True, dest="type_name")
    sd.add_argument("--file", default=None)

    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING), stream=sys.stderr)

    if not args.cmd:
        parser.print_help()
        return 0

    provider = FramProvider(version=__version__, settings=settings)

    if args.cmd == "schema":
        payload = provider.schemas()
        payload.update(provider.metadata())
        _emit(payload)
        return 0

    if args.cmd == "serve":
        from fram_provider.plugin_app import create_app
        app = create_app(provider=provider, settings=settings)
        app.run(host=args.listen_host or settings.listen_host, port=args.listen_port or settings.listen_port)
        return 0

    try:
        document = _load_document(getattr(args, "file", None))
    except (OSError, yaml.YAMLError) as exc:
        parser.error(f"Unable to read request document: {exc}")

    if args.cmd == "data":
        data_source, diags = provider.data_source(args.type_name)
        if data_source is None:
            return _report(diags)
        diags.append(provider.configure(_provider_config(args)))
        if diags.has_error():
            return _report(diags)
        resp = read_data_source(data_source, _unwrap(document, "config"))
        diags.append(resp.diagnostics)
        _emit({"state": resp.state})
        return _report(diags)

    resource, diags = provider.resource(args.type_name)
    if resource is None:
        return _report(diags)

    if args.cmd == "plan":
        document = document or {}
        if not isinstance(document, dict):
            parser.error("Plan request must be a mapping with 'prior_state' and 'config'")
        proposed = plan(resource, document.get("prior_state"), document.get("config"))
        _emit(proposed.to_dict())
        return _report(proposed.diagnostics)

    diags.append(provider.configure(_provider_config(args)))
    if diags.has_error():
        return _report(diags)

    if args.cmd == "apply":
        try:
            proposed = Plan.from_dict(_unwrap(document, "plan") or {})
        except ValueError as exc:
            parser.error(str(exc))
        resp = apply(resource, proposed)
        diags.append(resp.diagnostics)
        _emit({"state": resp.state})
        return _report(diags)

    if args.cmd == "read":
        resp = read_resource(resource, _unwrap(document, "state") or {})
        diags.append(resp.diagnostics)
        _emit({"state": resp.state, "removed": resp.removed})
        return _report(diags)

    if args.cmd == "import":
        resp = import_resource(resource, args.import_id)
        diags.append(resp.diagnostics)
        _emit({"state": resp.state})
        return _report(diags)

    parser.error(f"Unknown command: {args.cmd}")
    return 2


def _provider_config(args: argparse.Namespace) -> dict:
    return {
        "host": args.host,
        "username": args.username,
        "password": args.password,
        "realm": args.realm,
        "idm_host": args.idm_host,
    }


if __name__ == "__main__":
    sys.exit(main())
