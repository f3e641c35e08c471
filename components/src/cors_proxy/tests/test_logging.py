# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for cors_proxy.logging."""

import io
import logging

import pytest

from cors_proxy.logging import (
    LIBRARY_LOGGERS,
    ColorFormatter,
    configure_proxy_logging,
    log_level_mapping,
)

pytestmark = [
    pytest.mark.unit,
    pytest.mark.pre_merge,
]


@pytest.mark.parametrize(
    "value,level",
    [
        ("debug", logging.DEBUG),
        ("trace", logging.DEBUG),
        ("info", logging.INFO),
        ("INFO", logging.INFO),
        ("warn", logging.WARNING),
        ("warning", logging.WARNING),
        ("error", logging.ERROR),
        ("critical", logging.CRITICAL),
        ("bogus", logging.INFO),
        ("", logging.INFO),
    ],
)
def test_log_level_mapping(value, level):
    assert log_level_mapping(value) == level


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_configure_proxy_logging(monkeypatch, restore_root_logger):
    monkeypatch.setenv("CORS_PROXY_LOG", "warn")
    stream = io.StringIO()

    assert configure_proxy_logging(stream) == logging.WARNING

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.WARNING
    for name in LIBRARY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING

    logging.getLogger("cors_proxy.handler").warning("upstream %s failed", "x")
    logging.getLogger("cors_proxy.handler").info("not shown")
    output = stream.getvalue()
    assert "WARNING" in output
    assert "upstream x failed" in output
    assert "not shown" not in output


def test_formatter_without_color():
    record = logging.LogRecord(
        name="cors_proxy.relay",
        level=logging.ERROR,
        pathname="relay.py",
        lineno=10,
        msg="copy failed: %s",
        args=("reset",),
        exc_info=None,
        func="relay",
    )
    line = ColorFormatter(use_color=False).format(record)
    assert "\033[" not in line
    assert line.endswith("ERROR relay.relay: copy failed: reset")
