# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
CORS proxy request handler.

If the proxy is served on proxy.example, then a request to

    http://proxy.example/http://something.tld/blog/feed.atom

makes a server-side request to

    http://something.tld/blog/feed.atom

and relays the response with two headers added:

    Access-Control-Allow-Origin: *
    Access-Control-Allow-Methods: GET, DELETE, HEAD, OPTIONS, PATCH, POST, PUT, TRACE

OPTIONS requests are answered directly as CORS preflights.
"""

import logging
from typing import Optional, Sequence, TextIO

import httpx
from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from starlette.websockets import WebSocketClose

from .activity import ActivityLogger
from .headers import add_cors_headers
from .relay import UpstreamBody, relay
from .translator import TargetURLError, translate
from .upstream import invoke

logger = logging.getLogger(__name__)

MISSING_REQUEST_MESSAGE = "Internal Server Error: no request to proxy"


def error_response(message: str) -> Response:
    return PlainTextResponse(message, status_code=500)


class ProxyHandler:
    """
    ASGI application that proxies every request to the URL in its path.

    Args:
        methods: Value of Access-Control-Allow-Methods, in order. Empty uses
            the default list.
        log_writer: Optional text sink for the activity log.
        client: Client for upstream requests. May be attached later, e.g.
            by the application lifespan.
    """

    def __init__(
        self,
        methods: Optional[Sequence[str]] = None,
        log_writer: Optional[TextIO] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.methods = tuple(methods or ())
        self.activity = ActivityLogger(log_writer)
        self.client = client

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] != "http":
            if scope["type"] == "websocket":
                await WebSocketClose()(scope, receive, send)
            return
        request = Request(scope, receive)
        response = await self.handle(request)
        try:
            await response(scope, receive, send)
        finally:
            # The body may never be iterated, or be abandoned mid-copy.
            body = getattr(response, "body_iterator", None)
            if isinstance(body, UpstreamBody):
                await body.aclose()

    async def handle(self, request: Optional[Request]) -> Response:
        """Dispatch one request. Always returns exactly one response."""
        if request is None:
            logger.error("Proxy handler called without a request")
            return error_response(MISSING_REQUEST_MESSAGE)

        self.activity.client_request(request)

        if request.method == "OPTIONS":
            return self.serve_options()
        return await self.serve_proxy(request)

    def serve_options(self) -> Response:
        """Answer a CORS preflight without contacting upstream."""
        response = Response(status_code=204)
        try:
            add_cors_headers(response.headers, self.methods)
        except ValueError as e:
            logger.error("Could not build preflight response: %s", e)
            return error_response(str(e))
        return response

    async def serve_proxy(self, request: Request) -> Response:
        if self.client is None:
            logger.error("Upstream client is not started")
            return error_response("Internal Server Error: upstream client is not started")

        try:
            upstream_request = translate(self.client, request)
        except TargetURLError as e:
            logger.error("Bad target for %s request: %s", request.method, e)
            return error_response(str(e))
        self.activity.proxy_request(upstream_request)

        try:
            upstream_response = await invoke(self.client, upstream_request)
        except httpx.RequestError as e:
            logger.error(
                "Upstream %s %s failed: %s",
                upstream_request.method,
                upstream_request.url,
                e,
            )
            return error_response(str(e) or type(e).__name__)
        self.activity.proxy_response(upstream_response)

        try:
            return relay(upstream_response, self.methods)
        except ValueError as e:
            await upstream_response.aclose()
            logger.error("Could not relay response from %s: %s", upstream_request.url, e)
            return error_response(str(e) or type(e).__name__)
