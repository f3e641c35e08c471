# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
CORS proxy entry point.

Usage: python -m cors_proxy [--port 8080] [--allowed-methods GET POST] [--activity-log -]
"""

import logging
from typing import Optional, Sequence

import uvicorn

from .app import create_app
from .config import parse_args
from .logging import configure_proxy_logging

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None):
    """Entry point for the CORS proxy."""
    level = configure_proxy_logging()
    config = parse_args(argv)

    logger.info("Starting CORS proxy")
    logger.info("  Listening on:     %s:%d", config.host, config.port)
    logger.info("  Activity log:     %s", config.activity_log or "disabled")
    logger.info("  Upstream timeout: %s", config.upstream_timeout or "none")
    logger.info("  Follow redirects: %s", config.follow_redirects)

    # Relayed responses carry the upstream Server and Date headers.
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        loop="uvloop",
        log_config=None,
        log_level=level,
        server_header=False,
        date_header=False,
    )


if __name__ == "__main__":
    main()
