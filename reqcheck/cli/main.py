# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""``reqcheck`` console entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from ..contract import BundleSchemaStore, load_contract_file, locate_contract_file
from ..exceptions import ConfigurationError, ContractNotFoundError
from ..request import HttpRequest
from ..validator import RequestValidator

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def _parse_header(value: str) -> Tuple[str, str]:
    name, sep, content = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected 'Name: value', got {value!r}")
    return name.strip(), content.strip()


def _read_data(value: Optional[str]) -> Optional[bytes]:
    if value is None:
        return None
    if value.startswith("@"):
        return Path(value[1:]).read_bytes()
    return value.encode("utf-8")


def _load_store(args: argparse.Namespace) -> BundleSchemaStore:
    return BundleSchemaStore(load_contract_file(locate_contract_file(args.contract)))


def cmd_check(args: argparse.Namespace) -> int:
    validator = RequestValidator(_load_store(args), strict_content_type=args.strict or None)
    request = HttpRequest.from_url(args.method, args.url, headers=args.header, body=_read_data(args.data))

    outcome = validator.check(request)
    if outcome.ok:
        print("OK")
        return EXIT_OK

    print(f"FAIL [{outcome.kind}] {outcome.failure.message}")
    return EXIT_INVALID


def cmd_routes(args: argparse.Namespace) -> int:
    store = _load_store(args)
    for method, path in store.bundle.operations:
        print(f"{method} {path}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reqcheck", description="Validate HTTP requests against an API contract.")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="validate one request")
    check.add_argument("url", help="request target, e.g. '/users?limit=10'")
    check.add_argument("--contract", help="contract file (defaults to REQCHECK_CONTRACT_FILE or search paths)")
    check.add_argument("-X", "--method", default="GET", help="HTTP method (default: GET)")
    check.add_argument(
        "-H", "--header", action="append", default=[], type=_parse_header, help="request header 'Name: value'"
    )
    check.add_argument("-d", "--data", help="request body, or @file to read it from a file")
    check.add_argument(
        "--strict", action="store_true", help="reject content types without a declared body schema"
    )
    check.set_defaults(func=cmd_check)

    routes = subparsers.add_parser("routes", help="list operations declared by the contract")
    routes.add_argument("--contract", help="contract file")
    routes.set_defaults(func=cmd_routes)

    return parser


def run_command(args: argparse.Namespace) -> int:
    try:
        return args.func(args)
    except (ConfigurationError, ContractNotFoundError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return run_command(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
