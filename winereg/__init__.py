# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/__init__.py
"""
winereg - offline reader/writer for Wine prefix registry hives

Usage as a library:

    from winereg import Registry, Dword

    reg = Registry.load_prefix("/home/me/.wine")   # wineserver must be stopped
    key = reg.query(r"HKCU\\Control Panel\\Desktop", create=True)
    key.set_value("LogPixels", Dword(120))
    reg.save()
"""

__version__ = "0.1.0"

from .config import RegistryConfig, load_config
from .core.exceptions import RegistryEncodeError, RegistryFormatError, RegistryPathError, WineRegError
from .registry import (
    Binary,
    BinaryString,
    Dword,
    DwordBE,
    DwordLE,
    ExpandString,
    Filetime,
    Link,
    MultiString,
    Qword,
    RegFormat,
    Registry,
    RegistryKey,
    RegistryValue,
    String,
    TypedBytes,
    export_string,
    parse_registry,
    parse_registry_file,
)

__all__ = [
    "__version__",
    "RegistryConfig",
    "load_config",
    "WineRegError",
    "RegistryFormatError",
    "RegistryEncodeError",
    "RegistryPathError",
    "Registry",
    "RegistryKey",
    "RegistryValue",
    "RegFormat",
    "Filetime",
    "String",
    "BinaryString",
    "ExpandString",
    "MultiString",
    "Dword",
    "DwordLE",
    "DwordBE",
    "Qword",
    "Binary",
    "Link",
    "TypedBytes",
    "parse_registry",
    "parse_registry_file",
    "export_string",
]
