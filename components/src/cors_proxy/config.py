# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Command line and environment configuration for the CORS proxy."""

import argparse
import os
from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

from .headers import DEFAULT_METHODS, WEBDAV_METHODS

T = TypeVar("T")

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


@dataclass(frozen=True)
class ProxyConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    # Empty means DEFAULT_METHODS.
    methods: tuple[str, ...] = ()
    # Path of the activity log, "-" for stdout, None to disable it.
    activity_log: Optional[str] = None
    upstream_timeout: Optional[float] = None
    follow_redirects: bool = True


def env_or_default(env_var: str, default: T) -> T:
    """
    Get value from environment variable or return default.

    Performs type conversion based on the default value's type.

    Examples:
        >>> env_or_default("CORS_PROXY_PORT", 8080)
        9000  # if CORS_PROXY_PORT="9000"
        >>> env_or_default("CORS_PROXY_FOLLOW_REDIRECTS", True)
        False  # if CORS_PROXY_FOLLOW_REDIRECTS="0"
    """
    value = os.environ.get(env_var)
    if value is None:
        return default

    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes", "on")  # type: ignore
    elif isinstance(default, int):
        return int(value)  # type: ignore
    elif isinstance(default, float):
        return float(value)  # type: ignore
    else:
        return value  # type: ignore


def split_methods(value: Optional[str]) -> list[str]:
    """Split a comma separated method list, keeping order and case."""
    if not value:
        return []
    return [m.strip() for m in value.split(",") if m.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cors-proxy",
        description=(
            "Open CORS proxy.\n"
            "A request to http://<proxy>/http://example.com/feed.atom is forwarded\n"
            "to http://example.com/feed.atom and the response is relayed with\n"
            "Access-Control-Allow-Origin and Access-Control-Allow-Methods added."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--host",
        type=str,
        default=env_or_default("CORS_PROXY_HOST", DEFAULT_HOST),
        help=f"Bind address (env: CORS_PROXY_HOST, default: {DEFAULT_HOST}).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=env_or_default("CORS_PROXY_PORT", DEFAULT_PORT),
        help=f"Bind port (env: CORS_PROXY_PORT, default: {DEFAULT_PORT}).",
    )

    methods = parser.add_mutually_exclusive_group()
    methods.add_argument(
        "--allowed-methods",
        nargs="+",
        metavar="METHOD",
        default=split_methods(os.environ.get("CORS_PROXY_ALLOWED_METHODS")),
        help=(
            "Methods listed in Access-Control-Allow-Methods, in order.\n"
            "Methods are case-sensitive and are not normalised.\n"
            "(env: CORS_PROXY_ALLOWED_METHODS, comma separated;\n"
            f" default: {', '.join(DEFAULT_METHODS)})"
        ),
    )
    methods.add_argument(
        "--webdav-methods",
        action="store_true",
        help=f"Allow the WebDAV methods too: {', '.join(WEBDAV_METHODS)}.",
    )

    parser.add_argument(
        "--activity-log",
        type=str,
        default=env_or_default("CORS_PROXY_ACTIVITY_LOG", None),
        help=(
            "Write one line per client request, proxy request and proxy\n"
            "response to this file; '-' writes to stdout.\n"
            "(env: CORS_PROXY_ACTIVITY_LOG, default: disabled)"
        ),
    )
    parser.add_argument(
        "--upstream-timeout",
        type=float,
        default=_optional_float(os.environ.get("CORS_PROXY_UPSTREAM_TIMEOUT")),
        help=(
            "Seconds before an upstream request fails.\n"
            "(env: CORS_PROXY_UPSTREAM_TIMEOUT, default: no timeout)"
        ),
    )
    parser.add_argument(
        "--follow-redirects",
        action=argparse.BooleanOptionalAction,
        default=env_or_default("CORS_PROXY_FOLLOW_REDIRECTS", True),
        help="Follow upstream redirects (env: CORS_PROXY_FOLLOW_REDIRECTS).",
    )
    return parser


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def parse_args(argv: Optional[Sequence[str]] = None) -> ProxyConfig:
    args = build_parser().parse_args(argv)

    if args.webdav_methods:
        methods = WEBDAV_METHODS
    else:
        methods = tuple(args.allowed_methods)

    return ProxyConfig(
        host=args.host,
        port=args.port,
        methods=methods,
        activity_log=args.activity_log,
        upstream_timeout=args.upstream_timeout,
        follow_redirects=args.follow_redirects,
    )
