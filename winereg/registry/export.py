# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/registry/export.py
"""
Serialize a key tree as a Wine dump (system.reg / user.reg) or as a
regedit interchange file.

Output must match the runtime's own writer byte for byte, including the
column at which hex payloads wrap.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import TextIO, Union

from ..core.exceptions import WineRegError, encode_error
from ..core.file_ops import atomic_write
from .encoding import HEADER_REGEDIT, HEADER_WINE, RegFormat, encode, escape
from .key import HKCU, HKLM, RegistryKey, RegistryValue
from .parser import ROOT_DIRECTIVE, SCOPE_PATHS

logger = logging.getLogger(__name__)

WRAP_COLUMN = 76
CONTINUATION = "\\\n  "

ARCH_DIRECTIVE = "#arch=win64"

_SCOPE_BY_ROOT = {root: path for path, root in SCOPE_PATHS.items()}


def escape_key_path(path: str) -> str:
    """
    Write code points above the BMP as \\xHHHH UTF-16 surrogate units, and
    control characters and lone surrogates as a single \\xHHHH unit, so
    every key name fits on its header line.
    """
    out = []
    for ch in path:
        cp = ord(ch)
        if cp > 0xFFFF:
            units = ch.encode("utf-16-le")
            out.append("\\x%04x" % int.from_bytes(units[:2], "little"))
            out.append("\\x%04x" % int.from_bytes(units[2:], "little"))
        elif cp < 0x20 or cp == 0x7F or 0xD800 <= cp <= 0xDFFF:
            out.append("\\x%04x" % cp)
        else:
            out.append(ch)
    return "".join(out)


def _hex_payload(payload: bytes, pos: int) -> str:
    """
    Comma-separated hex pairs, wrapped with a backslash continuation once
    the running column passes WRAP_COLUMN.
    """
    out = []
    last = len(payload) - 1
    for i, b in enumerate(payload):
        out.append(f"{b:02x}")
        pos += 3
        if i < last:
            out.append(",")
            if pos + 1 > WRAP_COLUMN:
                out.append(CONTINUATION)
                pos = 2
    return "".join(out)


def format_value(value: RegistryValue, fmt: RegFormat) -> str:
    """Render one value line (without the trailing newline)."""
    prefix = f'"{escape(value.name)}"=' if value.name else "@="
    tag, payload = encode(value.data, fmt)
    if tag == "":
        return prefix + str(payload)
    if isinstance(payload, str):
        return f"{prefix}{tag}:{payload}"
    # The column count leaves out the tag's colon; regedit wraps the same way.
    pos = len(prefix.encode("utf-8")) + len(tag)
    return f"{prefix}{tag}:{_hex_payload(payload, pos)}"


class RegistryExporter:
    def __init__(self, out: TextIO, fmt: RegFormat):
        self.out = out
        self.fmt = fmt
        self.keys = 0

    @property
    def wine(self) -> bool:
        return self.fmt is RegFormat.WINE

    def header(self, key: RegistryKey) -> None:
        if not self.wine:
            self.out.write(HEADER_REGEDIT + "\n")
            return

        scope = _SCOPE_BY_ROOT.get(key.root().name)
        if scope is None:
            raise encode_error(
                f"cannot write {key.root().name!r} as a Wine hive; root must be {HKLM} or {HKCU}",
                root=key.root().name,
            )
        self.out.write(f"{HEADER_WINE}\n{ROOT_DIRECTIVE}{scope}\n\n{ARCH_DIRECTIVE}\n")

    def key(self, key: RegistryKey) -> None:
        # regedit has no syntax for link keys
        if key.is_link and not self.wine:
            return

        if key.values or (self.wine and not key.modified.is_zero()):
            self.keys += 1
            if self.wine:
                path = escape_key_path(key.relative_path("\\\\"))
                self.out.write(f"\n[{path}] {key.modified.unix()}\n#time={key.modified.ticks:x}\n")
                if key.is_link:
                    self.out.write("#link\n")
            else:
                self.out.write(f"\n[{escape_key_path(key.path())}]\n")

        for v in key.values:
            try:
                self.out.write(format_value(v, self.fmt))
            except WineRegError as e:
                e.with_context(key=key.path(), value=v.name)
                raise
            self.out.write("\n")

        for sk in key.subkeys:
            self.key(sk)

    def run(self, key: RegistryKey) -> None:
        self.header(key)
        self.key(key)
        logger.debug("Exported %r as %s (%d key blocks)", key.path(), self.fmt.value, self.keys)


def export(key: RegistryKey, out: TextIO, fmt: RegFormat = RegFormat.REGEDIT) -> None:
    """
    Write key and its subtree to out.

    RegFormat.REGEDIT writes absolute paths and skips link keys;
    RegFormat.WINE writes the runtime's dump with timestamps and links.
    """
    RegistryExporter(out, fmt).run(key)


def export_string(key: RegistryKey, fmt: RegFormat = RegFormat.REGEDIT) -> str:
    buf = io.StringIO()
    export(key, buf, fmt)
    return buf.getvalue()


def export_file(
    key: RegistryKey,
    path: Union[str, Path],
    fmt: RegFormat = RegFormat.WINE,
    *,
    atomic: bool = True,
) -> None:
    """
    Write key to path, replacing any previous contents. With atomic=True
    the text goes to a sibling temp file first and is renamed into place.
    """
    text = export_string(key, fmt)
    target = Path(path)
    if not atomic:
        with open(target, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        return
    with atomic_write(target) as tmp:
        with open(tmp, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
