# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Open CORS proxy.

Serves requests of the form http://<proxy>/<absolute-url> by forwarding them
to <absolute-url> and relaying the response with the CORS headers a browser
needs to read it cross-origin.
"""

from .app import create_app
from .config import ProxyConfig, parse_args
from .handler import ProxyHandler
from .headers import DEFAULT_METHODS, WEBDAV_METHODS, add_cors_headers, allowed_methods
from .translator import TargetURLError

__all__ = [
    "create_app",
    "ProxyConfig",
    "parse_args",
    "ProxyHandler",
    "DEFAULT_METHODS",
    "WEBDAV_METHODS",
    "add_cors_headers",
    "allowed_methods",
    "TargetURLError",
]
