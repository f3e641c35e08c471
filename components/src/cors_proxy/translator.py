# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Derive the upstream request from an incoming proxy request.

A request to

    http://proxy.example/http://something.tld/blog/feed.atom?page=2

targets

    http://something.tld/blog/feed.atom?page=2

The request-target is used verbatim after removing a single leading slash.
Method and body are passed through unchanged.
"""

import logging
from typing import AsyncIterator, Optional

import httpx
from fastapi import Request

from .activity import request_target

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https")


class TargetURLError(ValueError):
    """The request-target does not embed a usable absolute URL."""


def target_url(raw_target: str) -> str:
    """Strip exactly one leading slash from a request-target."""
    if raw_target.startswith("/"):
        return raw_target[1:]
    return raw_target


def parse_target_url(raw_target: str) -> httpx.URL:
    """
    Build the upstream URL for a request-target.

    Raises:
        TargetURLError: if the remainder is not an absolute http(s) URL.
    """
    remainder = target_url(raw_target)
    try:
        url = httpx.URL(remainder)
    except httpx.InvalidURL as e:
        raise TargetURLError(f"parse {remainder!r}: {e}") from e

    if url.scheme not in SUPPORTED_SCHEMES:
        raise TargetURLError(
            f"parse {remainder!r}: unsupported protocol scheme {url.scheme!r}"
        )
    if not url.host:
        raise TargetURLError(f"parse {remainder!r}: missing host")
    return url


def _request_body(request: Request) -> tuple[dict, Optional[AsyncIterator[bytes]]]:
    """Headers that frame the body, and the body stream, if the request has one."""
    content_length = request.headers.get("content-length")
    if content_length is not None:
        if content_length.strip() == "0":
            return {}, None
        return {"Content-Length": content_length}, request.stream()
    if "transfer-encoding" in request.headers:
        return {}, request.stream()
    return {}, None


def translate(client: httpx.AsyncClient, request: Request) -> httpx.Request:
    """
    Build the upstream request for an incoming request.

    The body stream is handed over unread; it is consumed when the request
    is sent.

    Raises:
        TargetURLError: if the embedded target URL is malformed.
    """
    url = parse_target_url(request_target(request))
    headers, content = _request_body(request)
    upstream_request = client.build_request(
        request.method, url, headers=headers, content=content
    )
    # httpx upper-cases methods, but method names are case-sensitive.
    upstream_request.method = request.method
    logger.debug("Translated %s request -> %s", request.method, url)
    return upstream_request
