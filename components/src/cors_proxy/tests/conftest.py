# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Conftest for cors_proxy tests. No test here touches the network."""

from typing import Callable, List, Optional

import httpx
import pytest

from cors_proxy.handler import ProxyHandler


class FakeUpstream:
    """
    httpx.MockTransport handler standing in for every upstream server.

    Records the requests it receives and answers them with `reply`.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.reply: Callable[[httpx.Request], httpx.Response] = lambda request: (
            httpx.Response(200, stream=httpx.ByteStream(b""))
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        # MockTransport has already read the request body.
        self.requests.append(request)
        return self.reply(request)


def make_response(
    status_code: int = 200,
    headers: Optional[list] = None,
    body: bytes = b"",
) -> httpx.Response:
    # stream= keeps the body unread, like a response from a real transport.
    return httpx.Response(
        status_code, headers=headers or [], stream=httpx.ByteStream(body)
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def respond(upstream):
    """Set the canned upstream response: respond(200, [("X-Foo", "1")], b"ok")."""

    def _respond(status_code=200, headers=None, body=b""):
        upstream.reply = lambda request: make_response(status_code, headers, body)

    return _respond


@pytest.fixture
def upstream_client(upstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.MockTransport(upstream), follow_redirects=True
    )


@pytest.fixture
def make_proxy(upstream_client):
    """Build a ProxyHandler wired to the fake upstream."""

    def _make(methods=None, log_writer=None) -> ProxyHandler:
        return ProxyHandler(
            methods=methods, log_writer=log_writer, client=upstream_client
        )

    return _make


@pytest.fixture
def proxy_client():
    """Build a client that sends requests through an ASGI app in-process."""

    def _client(app) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=app))

    return _client
