# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/registry/filetime.py
"""
Windows FILETIME: signed 64-bit count of 100ns ticks since 1601-01-01 UTC.
"""
from __future__ import annotations

import datetime as _dt
import struct
from dataclasses import dataclass

# Ticks between 1601-01-01 and 1970-01-01.
UNIX_EPOCH_TICKS = 116444736000000000
TICKS_PER_SECOND = 10_000_000
TICKS_PER_MICROSECOND = 10

EPOCH = _dt.datetime(1601, 1, 1, tzinfo=_dt.timezone.utc)

_LE_INT64 = struct.Struct("<q")
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


@dataclass(frozen=True, order=True)
class Filetime:
    ticks: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.ticks, bool) or not isinstance(self.ticks, int):
            raise TypeError(f"filetime ticks must be int, got {type(self.ticks).__name__}")
        if not INT64_MIN <= self.ticks <= INT64_MAX:
            raise ValueError(f"filetime ticks out of int64 range: {self.ticks}")

    def __int__(self) -> int:
        return self.ticks

    def is_zero(self) -> bool:
        """True for the 'never modified' sentinel (tick 0)."""
        return self.ticks == 0

    def unix(self) -> int:
        """Unix seconds, truncating toward zero."""
        d = self.ticks - UNIX_EPOCH_TICKS
        q = abs(d) // TICKS_PER_SECOND
        return q if d >= 0 else -q

    @classmethod
    def from_unix(cls, seconds: int) -> "Filetime":
        return cls(int(seconds) * TICKS_PER_SECOND + UNIX_EPOCH_TICKS)

    def to_datetime(self) -> _dt.datetime:
        """UTC datetime; sub-microsecond ticks are dropped."""
        return EPOCH + _dt.timedelta(microseconds=self.ticks // TICKS_PER_MICROSECOND)

    @classmethod
    def from_datetime(cls, when: _dt.datetime) -> "Filetime":
        # naive datetimes are taken as UTC
        if when.tzinfo is None:
            when = when.replace(tzinfo=_dt.timezone.utc)
        delta = when - EPOCH
        us = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
        return cls(us * TICKS_PER_MICROSECOND)

    @classmethod
    def now(cls) -> "Filetime":
        return cls.from_datetime(_dt.datetime.now(_dt.timezone.utc))

    def to_bytes(self) -> bytes:
        """8-byte little-endian form."""
        return _LE_INT64.pack(self.ticks)

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Filetime":
        if len(raw) != _LE_INT64.size:
            raise ValueError(f"filetime needs exactly 8 bytes, got {len(raw)}")
        return cls(_LE_INT64.unpack(raw)[0])


ZERO = Filetime(0)
