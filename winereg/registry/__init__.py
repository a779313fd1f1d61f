# SPDX-License-Identifier: LGPL-3.0-or-later
# winereg/registry/__init__.py
"""
Offline Wine registry codec.

- filetime: FILETIME tick counter conversions
- values:   the closed set of value types
- encoding: value codec (wire tag + payload) and C-style quoting
- key:      in-memory key tree
- parser:   dump / regedit importer
- export:   dump / regedit serializer
- hive:     machine + user trees bound to a prefix's files
"""

from .encoding import HEADER_REGEDIT, HEADER_WINE, RegFormat, decode, encode
from .export import export, export_file, export_string
from .filetime import Filetime
from .hive import Registry
from .key import HKCU, HKLM, RegistryKey, RegistryValue
from .parser import USER_SID, import_registry, parse_registry, parse_registry_file
from .values import (
    Binary,
    BinaryString,
    Dword,
    DwordBE,
    DwordLE,
    ExpandString,
    Link,
    MultiString,
    Qword,
    RegistryData,
    String,
    TypedBytes,
)

__all__ = [
    "HEADER_REGEDIT",
    "HEADER_WINE",
    "HKCU",
    "HKLM",
    "USER_SID",
    "Binary",
    "BinaryString",
    "Dword",
    "DwordBE",
    "DwordLE",
    "ExpandString",
    "Filetime",
    "Link",
    "MultiString",
    "Qword",
    "RegFormat",
    "Registry",
    "RegistryData",
    "RegistryKey",
    "RegistryValue",
    "String",
    "TypedBytes",
    "decode",
    "encode",
    "export",
    "export_file",
    "export_string",
    "import_registry",
    "parse_registry",
    "parse_registry_file",
]
