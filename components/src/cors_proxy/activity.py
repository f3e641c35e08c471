# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Activity log for proxied traffic.

Writes one line per event to an optional text sink:

    CLIENT REQUEST: GET http://localhost:8080/http://example.com/feed.atom
    PROXY REQUEST:  GET http://example.com/feed.atom
    PROXY RESPONSE: 200 OK GET http://example.com/feed.atom

This is separate from process logging. Writes are best-effort: a failing
sink never interrupts request handling.
"""

import logging
from typing import Optional, TextIO

import httpx
from fastapi import Request

logger = logging.getLogger(__name__)


def request_target(request: Request) -> str:
    """Return the path and query of a request exactly as they were received."""
    raw_path = request.scope.get("raw_path") or request.scope["path"].encode(
        "utf-8"
    )
    # Some servers include the query string in raw_path.
    raw_path = raw_path.split(b"?", 1)[0]
    target = raw_path.decode("latin-1")
    query_string = request.scope.get("query_string", b"")
    if query_string:
        target += "?" + query_string.decode("latin-1")
    return target


def _upstream_target(url: httpx.URL) -> tuple[str, str]:
    return url.netloc.decode("ascii"), url.raw_path.decode("ascii")


class ActivityLogger:
    def __init__(self, writer: Optional[TextIO] = None):
        self.writer = writer

    def _write(self, line: str) -> None:
        if self.writer is None:
            return
        try:
            self.writer.write(line + "\n")
            self.writer.flush()
        except Exception as e:
            logger.debug("Activity log write failed: %s", e)

    def client_request(self, request: Request) -> None:
        if self.writer is None:
            return
        host = request.headers.get("host", "")
        self._write(
            f"CLIENT REQUEST: {request.method} http://{host}{request_target(request)}"
        )

    def proxy_request(self, request: httpx.Request) -> None:
        if self.writer is None:
            return
        host, target = _upstream_target(request.url)
        self._write(f"PROXY REQUEST:  {request.method} http://{host}{target}")

    def proxy_response(self, response: httpx.Response) -> None:
        if self.writer is None:
            return
        request = response.request
        host, target = _upstream_target(request.url)
        status = f"{response.status_code} {response.reason_phrase}"
        self._write(
            f"PROXY RESPONSE: {status} {request.method} http://{host}{target}"
        )
