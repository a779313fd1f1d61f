# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""
Shared logging helpers for winereg.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Generator, Union

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


def emoji_for_level(level: int) -> str:
    """Return an emoji prefix for a log level."""
    if level >= logging.ERROR:
        return "❌"
    if level >= logging.WARNING:
        return "⚠️"
    if level >= logging.INFO:
        return "✅"
    return "🔍"


def log_with_emoji(logger: LoggerLike, level: int, msg: str, *args: Any) -> None:
    logger.log(level, f"{emoji_for_level(level)} {msg}", *args)


@contextmanager
def log_step(logger: LoggerLike, description: str, *, level: int = logging.DEBUG) -> Generator[None, None, None]:
    """
    Context manager for logging and timing operation steps.

    Logs the start of an operation, executes the block, then logs
    completion with elapsed time. Logs error and re-raises on exception.

    Example:
        with log_step(logger, "Loading user.reg"):
            key = parse_registry_file(path)
    """
    t0 = time.monotonic()
    log_with_emoji(logger, level, "%s ...", description)
    try:
        yield
        log_with_emoji(logger, level, "%s done (%.3fs)", description, time.monotonic() - t0)
    except Exception as e:
        log_with_emoji(logger, logging.ERROR, "%s failed (%.3fs): %s", description, time.monotonic() - t0, e)
        raise
