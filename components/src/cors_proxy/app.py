# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""FastAPI application serving the CORS proxy."""

import logging
import sys
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Optional, TextIO

import httpx
from fastapi import FastAPI

from .config import ProxyConfig
from .handler import ProxyHandler
from .headers import allowed_methods
from .upstream import create_http_client

logger = logging.getLogger(__name__)


def open_activity_log(path: Optional[str]) -> Optional[TextIO]:
    """Open the activity log sink. "-" is stdout, None disables the log."""
    if path is None:
        return None
    if path == "-":
        return sys.stdout
    return open(path, "a", encoding="utf-8")


def create_app(
    config: Optional[ProxyConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
    log_writer: Optional[TextIO] = None,
) -> FastAPI:
    """
    Build the proxy application.

    Every request, whatever its method or path, is handled by a single
    ProxyHandler. The upstream client and the activity log are opened on
    startup and closed on shutdown unless they are passed in, in which case
    the caller owns them.
    """
    config = config or ProxyConfig()
    handler = ProxyHandler(
        methods=config.methods, log_writer=log_writer, client=client
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with AsyncExitStack() as stack:
            if handler.client is None:
                logger.info("[Startup] Initializing httpx client for upstream requests")
                handler.client = await stack.enter_async_context(
                    create_http_client(
                        timeout=config.upstream_timeout,
                        follow_redirects=config.follow_redirects,
                    )
                )
                stack.callback(setattr, handler, "client", None)

            if handler.activity.writer is None and config.activity_log is not None:
                writer = open_activity_log(config.activity_log)
                handler.activity.writer = writer
                if writer is not sys.stdout:
                    stack.callback(writer.close)
                stack.callback(setattr, handler.activity, "writer", None)
                logger.info("[Startup] Activity log: %s", config.activity_log)

            logger.info(
                "[Startup] Access-Control-Allow-Methods: %s",
                allowed_methods(config.methods),
            )
            yield
            logger.info("[Shutdown] Closing upstream client")

    app = FastAPI(
        title="cors-proxy",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    # No routes: every request falls through to the proxy.
    app.router.default = handler
    app.state.proxy_handler = handler
    return app
