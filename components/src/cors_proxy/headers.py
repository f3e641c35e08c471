# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""CORS response headers."""

from typing import Final, Optional, Sequence

from starlette.datastructures import MutableHeaders

ALLOW_ORIGIN: Final = "Access-Control-Allow-Origin"
ALLOW_METHODS: Final = "Access-Control-Allow-Methods"

DEFAULT_METHODS: Final = (
    "GET",
    "DELETE",
    "HEAD",
    "OPTIONS",
    "PATCH",
    "POST",
    "PUT",
    "TRACE",
)

# Includes the WebDAV request methods.
WEBDAV_METHODS: Final = (
    "COPY",
    "GET",
    "DELETE",
    "HEAD",
    "LOCK",
    "MKCOL",
    "MOVE",
    "OPTIONS",
    "PATCH",
    "POST",
    "PROPFIND",
    "PROPPATCH",
    "PUT",
    "TRACE",
    "UNLOCK",
)


def allowed_methods(methods: Optional[Sequence[str]] = None) -> str:
    """
    Build the value of the Access-Control-Allow-Methods header.

    HTTP methods are case-sensitive, so the names are joined as given, in
    the order given. An empty or missing sequence yields:

        GET, DELETE, HEAD, OPTIONS, PATCH, POST, PUT, TRACE
    """
    if not methods:
        methods = DEFAULT_METHODS
    return ", ".join(methods)


def add_cors_headers(
    headers: MutableHeaders, methods: Optional[Sequence[str]] = None
) -> None:
    """
    Append the two CORS headers to a header collection.

    Existing headers are left alone. Each call appends a new entry per
    header name, so call it exactly once per response.
    """
    headers.append(ALLOW_ORIGIN, "*")
    headers.append(ALLOW_METHODS, allowed_methods(methods))
