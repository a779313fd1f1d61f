# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/registry/values.py
"""
Closed set of registry value types.

Each class is one wire form; anything that is not an instance of one of
these is rejected by the encoder.

  String         "..."              REG_SZ
  BinaryString   hex(1)             REG_SZ carried as raw UTF-16LE bytes
  ExpandString   str(2) / hex(2)    REG_EXPAND_SZ
  MultiString    str(7) / hex(7)    REG_MULTI_SZ
  Dword          dword:             REG_DWORD
  DwordLE        hex(4)             REG_DWORD_LITTLE_ENDIAN
  DwordBE        hex(5)             REG_DWORD_BIG_ENDIAN
  Qword          hex(b)             REG_QWORD
  Binary         hex:               REG_BINARY (zero length is REG_NONE)
  Link           hex(6)             REG_LINK
  TypedBytes     hex(XXXXXXXX)      caller-defined type id + opaque bytes
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

UINT32_MAX = 0xFFFFFFFF
UINT64_MAX = 0xFFFFFFFFFFFFFFFF


def _check_range(kind: str, v: int, hi: int) -> None:
    if isinstance(v, bool) or not isinstance(v, int):
        raise TypeError(f"{kind} value must be int, got {type(v).__name__}")
    if not 0 <= v <= hi:
        raise ValueError(f"{kind} value out of range: {v}")


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class BinaryString:
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class ExpandString:
    value: str


@dataclass(frozen=True)
class MultiString:
    values: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # accept any iterable of str, store immutably
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class Dword:
    value: int

    def __post_init__(self) -> None:
        _check_range("dword", self.value, UINT32_MAX)


@dataclass(frozen=True)
class DwordLE:
    value: int

    def __post_init__(self) -> None:
        _check_range("dword", self.value, UINT32_MAX)


@dataclass(frozen=True)
class DwordBE:
    value: int

    def __post_init__(self) -> None:
        _check_range("dword", self.value, UINT32_MAX)


@dataclass(frozen=True)
class Qword:
    value: int

    def __post_init__(self) -> None:
        _check_range("qword", self.value, UINT64_MAX)


@dataclass(frozen=True)
class Binary:
    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class Link:
    target: str


@dataclass(frozen=True)
class TypedBytes:
    identifier: int
    data: bytes = b""

    def __post_init__(self) -> None:
        _check_range("type identifier", self.identifier, UINT32_MAX)
        object.__setattr__(self, "data", bytes(self.data))


RegistryData = Union[
    String,
    BinaryString,
    ExpandString,
    MultiString,
    Dword,
    DwordLE,
    DwordBE,
    Qword,
    Binary,
    Link,
    TypedBytes,
]
