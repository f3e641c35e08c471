# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Send derived requests to the upstream server."""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


def create_http_client(
    timeout: Optional[float] = None, follow_redirects: bool = True
) -> httpx.AsyncClient:
    """
    Create the client used for all upstream requests.

    Args:
        timeout: Seconds before an upstream operation fails. None waits forever.
        follow_redirects: Follow upstream redirects instead of relaying them.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=follow_redirects,
    )


async def invoke(client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
    """
    Send one request upstream and return once the response headers arrive.

    The response body is left unread; the caller must close the response.

    Raises:
        httpx.RequestError: on DNS, connect, TLS, timeout or redirect failures.
    """
    logger.debug("Sending %s %s", request.method, request.url)
    response = await client.send(request, stream=True)
    logger.debug(
        "Upstream responded %s for %s %s",
        response.status_code,
        request.method,
        request.url,
    )
    return response
