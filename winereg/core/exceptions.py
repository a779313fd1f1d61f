# SPDX-License-Identifier: LGPL-3.0-or-later
# winereg/core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _one_line(s: str, limit: int = 600) -> str:
    s = " ".join((s or "").split())
    return s if len(s) <= limit else (s[: limit - 3] + "...")


@dataclass(eq=False)
class WineRegError(Exception):
    """
    Base error for the registry codec.

    context carries where the failure happened (line, key, value, path,
    tag); callers add to it with with_context() as the error propagates.
    """
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.msg = _one_line(self.msg) or self.__class__.__name__
        if self.context is None:
            self.context = {}
        super().__init__(self.msg)
        self.args = (self.msg,)

    def with_context(self, **ctx: Any) -> "WineRegError":
        if self.context is None:
            self.context = {}
        self.context.update(ctx)
        return self

    def __str__(self) -> str:
        return self.msg

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "message": self.msg,
            "context": dict(self.context or {}),
        }
        if self.cause is not None:
            d["cause"] = {"type": type(self.cause).__name__, "message": _one_line(str(self.cause))}
        return d


class RegistryFormatError(WineRegError):
    """
    Malformed registry text: bad header, unknown value tag, bad hex payload,
    value without key, duplicate or unknown root declaration.

    Always fatal to the current parse.
    """
    pass


class RegistryEncodeError(WineRegError):
    """
    A value or tree cannot be written: data outside the closed value set,
    or a dump export of a root that is neither machine nor user scope.
    """
    pass


class RegistryPathError(WineRegError):
    """Registry path that cannot be resolved to a hive or a detachable key."""
    pass


def format_error(msg: str, exc: Optional[BaseException] = None, **context: Any) -> RegistryFormatError:
    return RegistryFormatError(msg=msg, cause=exc, context=context or None)


def encode_error(msg: str, exc: Optional[BaseException] = None, **context: Any) -> RegistryEncodeError:
    return RegistryEncodeError(msg=msg, cause=exc, context=context or None)
