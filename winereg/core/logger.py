# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/core/logger.py
"""
Logging for winereg.

Library modules only emit records on loggers under "winereg". Log.setup
attaches a handler to that logger at the level a RegistryConfig names,
for applications that want those records shown.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from termcolor import colored

TRACE = 5
if not hasattr(logging, "TRACE"):
    logging.TRACE = TRACE  # type: ignore[attr-defined]
    logging.addLevelName(TRACE, "TRACE")


def _logger_trace(self: logging.Logger, msg: str, *args, **kwargs) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)


if not hasattr(logging.Logger, "trace"):
    logging.Logger.trace = _logger_trace  # type: ignore[attr-defined]

_LEVEL_COLOR = {
    "TRACE": "cyan",
    "DEBUG": "blue",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red",
}

Ctx = Mapping[str, Any]


def _format_ctx(ctx: Optional[Ctx]) -> str:
    # line=12 value='Foo', sorted so output is stable
    if not ctx:
        return ""
    return " " + " ".join(f"{k}={v!r}" if isinstance(v, str) else f"{k}={v}" for k, v in sorted(ctx.items()))


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Carries a fixed context (hive file, line, ...) into every record as
    record.ctx. A call site may add more with extra={"ctx": {...}}.
    """

    def __init__(self, logger: logging.Logger, ctx: Optional[Ctx] = None):
        super().__init__(logger, extra={"ctx": dict(ctx or {})})

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        extra = kwargs.get("extra") or {}
        extra["ctx"] = {**self.extra["ctx"], **(extra.get("ctx") or {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **ctx: Any) -> "ContextLoggerAdapter":
        return ContextLoggerAdapter(self.logger, {**self.extra["ctx"], **ctx})


class ConsoleFormatter(logging.Formatter):
    """'12:00:01 DEBUG    winereg.registry.hive: Loading ... hive='user.reg''"""

    def __init__(self, *, color: bool = False):
        super().__init__()
        self._color = color

    def format(self, record: logging.LogRecord) -> str:
        ts = _dt.datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        level = f"{record.levelname:<8}"
        if self._color:
            level = colored(level, _LEVEL_COLOR.get(record.levelname))
        line = f"{ts} {level} {record.name}: {record.getMessage()}{_format_ctx(getattr(record, 'ctx', None))}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg and ctx."""

    def format(self, record: logging.LogRecord) -> str:
        obj: Dict[str, Any] = {
            "ts": _dt.datetime.fromtimestamp(record.created, tz=_dt.timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        ctx = getattr(record, "ctx", None)
        if ctx:
            obj["ctx"] = {str(k): v if isinstance(v, (int, float, bool)) else str(v) for k, v in ctx.items()}
        if record.exc_info:
            obj["traceback"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False)


class Log:
    @staticmethod
    def level_from_name(level: Union[int, str]) -> int:
        """'debug', 'TRACE', 20 -> numeric level; ValueError if unknown."""
        if isinstance(level, int):
            return level
        value = logging.getLevelName(str(level).strip().upper())
        if not isinstance(value, int):
            raise ValueError(f"unknown log level: {level!r}")
        return value

    @staticmethod
    def bind(logger: logging.Logger, **ctx: Any) -> ContextLoggerAdapter:
        return ContextLoggerAdapter(logger, ctx)

    @staticmethod
    def trace(logger: logging.Logger, msg: str, *args: Any, **ctx: Any) -> None:
        if ctx:
            logger.trace(msg, *args, extra={"ctx": ctx})  # type: ignore[attr-defined]
        else:
            logger.trace(msg, *args)  # type: ignore[attr-defined]

    @staticmethod
    def setup(
        level: Union[int, str] = "INFO",
        *,
        log_file: Optional[Union[str, Path]] = None,
        color: bool = True,
        json_logs: bool = False,
        logger_name: str = "winereg",
    ) -> logging.Logger:
        """
        Route winereg records to stderr (and log_file if given), replacing
        handlers from an earlier call. level is usually
        RegistryConfig.log_level.
        """
        logger = logging.getLogger(logger_name)
        logger.propagate = False
        logger.setLevel(Log.level_from_name(level))

        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

        sh = logging.StreamHandler(stream=sys.stderr)
        sh.setFormatter(JsonFormatter() if json_logs else ConsoleFormatter(color=color and sys.stderr.isatty()))
        logger.addHandler(sh)

        if log_file:
            fp = Path(log_file).expanduser()
            fp.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(fp, encoding="utf-8")
            fh.setFormatter(JsonFormatter() if json_logs else ConsoleFormatter())
            logger.addHandler(fh)

        return logger
