# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
import os
import sys
from datetime import datetime, timezone

# Loggers of the libraries we serve and send requests with.
LIBRARY_LOGGERS = ["uvicorn", "uvicorn.error", "uvicorn.access", "httpx"]


class ColorFormatter(logging.Formatter):
    """Compact colored output: timestamp, level, module.function target, message."""

    _COLORS = {
        "DEBUG": "\033[2m",  # dim
        "INFO": "\033[32m",  # green
        "WARNING": "\033[33m",  # yellow
        "ERROR": "\033[31m",  # red
        "CRITICAL": "\033[31m",
    }
    _DIM = "\033[2m"
    _RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def _paint(self, color: str, text: str) -> str:
        if not self.use_color:
            return text
        return f"{color}{text}{self._RESET}"

    def format(self, record):
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
            "%Y-%m-%dT%H:%M:%S.%fZ"
        )
        level = record.levelname
        if record.funcName and record.funcName != "<module>":
            target = f"{record.module}.{record.funcName}"
        else:
            target = record.module
        msg = record.getMessage()
        if record.exc_info:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"
        return (
            f"{self._paint(self._DIM, ts)} "
            f"{self._paint(self._COLORS.get(level, ''), f'{level:>5}')} "
            f"{self._paint(self._DIM, target + ':')} "
            f"{msg}"
        )


def log_level_mapping(level: str) -> int:
    """
    The CORS_PROXY_LOG variable is set using "debug" or "trace" or "info".
    This function maps those to the appropriate logging level and defaults to INFO
    if the variable is not set or a bad value.
    """
    level = level.lower()
    if level == "debug":
        return logging.DEBUG
    elif level == "info":
        return logging.INFO
    elif level == "warn" or level == "warning":
        return logging.WARNING
    elif level == "error":
        return logging.ERROR
    elif level == "critical":
        return logging.CRITICAL
    elif level == "trace":
        return logging.DEBUG
    else:
        return logging.INFO


def configure_proxy_logging(stream=None) -> int:
    """
    A single place to configure logging for the proxy.

    Returns the level that was applied.
    """
    stream = stream or sys.stderr

    # First, remove any existing handlers to avoid duplication
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    level = log_level_mapping(os.environ.get("CORS_PROXY_LOG", "info"))

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColorFormatter(use_color=stream.isatty()))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Route library loggers through the root handler
    for logger_name in LIBRARY_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.handlers = []
        logger.setLevel(level)
        logger.propagate = True

    return level
