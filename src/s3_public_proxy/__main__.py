# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Command line entry point for running the gateway or signing a single URL.
"""

import argparse
import asyncio
import logging
import shlex
import sys
from collections.abc import Sequence

from ._http import SignedRequest
from .app import DEFAULT_HOST, DEFAULT_PORT, run
from .config import ProxyConfig
from .exceptions import ProxyError
from .signers import S3SigV4Signer

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def format_curl_command(request: SignedRequest) -> str:
    """Render a signed request as a copy-pasteable curl command."""
    cmd_list = ["curl"]
    if request.method == "HEAD":
        cmd_list.append("-I")
    else:
        cmd_list.append(f"-X {request.method}")
    for name, value in request.fields.items():
        cmd_list.append(f"-H {shlex.quote(f'{name}: {value}')}")
    cmd_list.append(shlex.quote(request.url))
    return " ".join(cmd_list)


def _serve(args: argparse.Namespace) -> None:
    run(ProxyConfig.from_environment(), host=args.host, port=args.port)


def _sign(args: argparse.Namespace) -> None:
    config = ProxyConfig.from_environment()
    signed = asyncio.run(
        S3SigV4Signer().sign(
            url=args.url, method=args.method, credentials=config.credentials
        )
    )
    print(format_curl_command(signed))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3-public-proxy",
        description="Read-only gateway to a private S3-compatible bucket",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the gateway")
    serve.add_argument("--host", default=DEFAULT_HOST, help="Address to listen on")
    serve.add_argument(
        "--port", type=int, default=DEFAULT_PORT, help="Port to listen on"
    )
    serve.set_defaults(func=_serve)

    sign = subparsers.add_parser(
        "sign", help="Print a signed curl command for an origin URL"
    )
    sign.add_argument("url", help="Fully-qualified origin URL")
    sign.add_argument(
        "-X",
        "--method",
        default="GET",
        choices=("GET", "HEAD"),
        type=str.upper,
        help="HTTP method to sign",
    )
    sign.set_defaults(func=_sign)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)
    try:
        args.func(args)
    except ProxyError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
