# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Relay an upstream response to the proxy client."""

import logging
from typing import AsyncIterator, Optional, Sequence

import anyio
import httpx
from fastapi.responses import StreamingResponse
from starlette.datastructures import MutableHeaders

from .headers import add_cors_headers

logger = logging.getLogger(__name__)

# Owned by the transport on each side of the proxy.
HOP_BY_HOP_HEADERS = frozenset([b"connection", b"keep-alive", b"transfer-encoding"])


class UpstreamBody:
    """
    Async iterator over the raw bytes of an upstream response.

    The upstream response is closed exactly once: when the body is
    exhausted, when reading it fails, or through aclose() by whoever sent
    the response, which covers a body that was never iterated or was
    abandoned mid-copy.
    """

    def __init__(self, response: httpx.Response):
        self._response = response
        self._closed = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_raw():
                yield chunk
        except httpx.HTTPError as e:
            logger.warning(
                "Body copy from %s ended early: %s", self._response.request.url, e
            )
            raise
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Release the upstream connection even if the client went away.
        with anyio.CancelScope(shield=True):
            await self._response.aclose()


def relay_headers(
    response: httpx.Response, methods: Optional[Sequence[str]] = None
) -> MutableHeaders:
    """
    Copy the upstream headers, duplicates and order included, and append
    the CORS headers.
    """
    headers = MutableHeaders(
        raw=[
            (name.lower(), value)
            for name, value in response.headers.raw
            if name.lower() not in HOP_BY_HOP_HEADERS
        ]
    )
    add_cors_headers(headers, methods)
    return headers


def relay(
    response: httpx.Response, methods: Optional[Sequence[str]] = None
) -> StreamingResponse:
    """Build the outgoing response for an upstream response."""
    body = UpstreamBody(response)
    outgoing = StreamingResponse(body, status_code=response.status_code)
    outgoing.raw_headers.extend(relay_headers(response, methods).raw)
    return outgoing
