# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/registry/parser.py
"""
Line-oriented importer for Wine dump files (system.reg, user.reg) and
regedit interchange files.

Any malformed line aborts the import with RegistryFormatError; the tree
placement of every later line depends on the earlier ones, so there is
no skip-and-continue.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import IO, Iterator, Optional, Tuple, Union

from ..core.exceptions import WineRegError, format_error
from ..core.logger import Log
from .encoding import HEADER_REGEDIT, HEADER_WINE, RegFormat, decode, read_quoted, split_value_data
from .filetime import Filetime
from .key import HKCU, HKLM, RegistryKey, RegistryValue, canonical_root, split_root

logger = logging.getLogger(__name__)

# Security identifier naming the user hive inside the runtime.
USER_SID = "S-1-5-21-0-0-0-1000"

ROOT_DIRECTIVE = ";; All keys relative to "
SCOPE_PATHS = {
    "REGISTRY\\\\User\\\\" + USER_SID: HKCU,
    "REGISTRY\\\\Machine": HKLM,
}

# "[path] seconds"; the last "]" before the optional seconds closes the path
_HEADER_RE = re.compile(r"^\[(.*)\](?:[ \t]+-?\d+)?[ \t]*$")
_DUMP_ESCAPE_RE = re.compile(r"\\(?:x([0-9a-fA-F]{4})|(.)|$)")
_REGEDIT_ESCAPE_RE = re.compile(r"\\x(d[89a-f][0-9a-f]{2}|00[01][0-9a-f]|007f)", re.IGNORECASE)
_TIME_RE = re.compile(r"^-?[0-9a-fA-F]{1,16}$")

Source = Union[str, bytes, bytearray, IO[str], IO[bytes]]


def _decode_text(raw: bytes) -> str:
    try:
        if raw.startswith((b"\xff\xfe", b"\xfe\xff")):
            return raw.decode("utf-16")
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise format_error(f"registry data is not valid text: {e.reason}", e) from e


def iter_lines(src: Source) -> Iterator[str]:
    """Yield lines without their terminators (LF or CRLF)."""
    if isinstance(src, (bytes, bytearray)):
        text = _decode_text(bytes(src))
    elif isinstance(src, str):
        text = src
    else:
        data = src.read()
        text = _decode_text(data) if isinstance(data, (bytes, bytearray)) else data
    for line in text.split("\n"):
        yield line[:-1] if line.endswith("\r") else line


def _join_units(s: str) -> str:
    # \xd83d\xde00 -> one astral code point
    return s.encode("utf-16-le", errors="surrogatepass").decode("utf-16-le", errors="surrogatepass")


def _unescape_dump(m: re.Match) -> str:
    if m.group(1) is not None:
        return chr(int(m.group(1), 16))
    if m.group(2) is None:
        raise format_error(f"dangling backslash in key path {m.string!r}")
    return m.group(2)


def decode_key_path(raw: str, fmt: RegFormat) -> str:
    """
    Unescape the text between a key header's brackets.

    Dump paths double their separators; a backslash escapes the next
    character and \\xHHHH is one UTF-16 unit. Interchange paths use single
    separators, so only the surrogate pairs and control characters the
    exporter writes as \\xHHHH are decoded there.
    """
    if fmt is RegFormat.REGEDIT:
        return _join_units(_REGEDIT_ESCAPE_RE.sub(lambda m: chr(int(m.group(1), 16)), raw))
    return _join_units(_DUMP_ESCAPE_RE.sub(_unescape_dump, raw))


class RegistryImporter:
    """
    Builds a key tree from registry text.

    State is the active key (the last bracket header, cleared by a blank
    line) and whether the stream has declared its root yet.
    """

    def __init__(self, root: RegistryKey):
        self.root = root
        self.fmt: Optional[RegFormat] = None
        self.current: Optional[RegistryKey] = None
        self.declared = False
        self.lineno = 0
        self.values = 0

    def _error(self, msg: str, exc: Optional[BaseException] = None) -> WineRegError:
        return format_error(msg, exc, line=self.lineno)

    def run(self, lines: Iterator[str]) -> RegistryKey:
        it = enumerate(lines, start=1)
        first = next(it, None)
        header = first[1] if first else ""
        self.lineno = 1
        if header == HEADER_WINE:
            self.fmt = RegFormat.WINE
        elif header == HEADER_REGEDIT:
            self.fmt = RegFormat.REGEDIT
        else:
            raise self._error(f"expected registry header, got {header!r}")

        for lineno, line in it:
            self.lineno = lineno
            if line == "":
                self.current = None
                continue
            head = line[0]
            if head == ";":
                self._comment(line)
            elif head == "#":
                self._directive(line)
            elif head == "[":
                self._key_header(line)
            elif head in ('"', "@"):
                self._value_line(self._read_continuation(line, it))
            else:
                raise self._error(f"unexpected line {line!r}")

        logger.debug(
            "Imported %s registry %r (%d lines, %d values)",
            self.fmt.value, self.root.name, self.lineno, self.values,
        )
        return self.root

    def _comment(self, line: str) -> None:
        if not line.startswith(ROOT_DIRECTIVE.rstrip()):
            return
        i = line.rfind(" ")
        if i <= 0:
            raise self._error("malformed root directive")
        if self.declared:
            raise self._error("unexpected second root directive")

        path = line[i + 1 :]
        name = SCOPE_PATHS.get(path)
        if name is None:
            raise self._error(f"unknown registry path: {path}")
        if self.root.name and self.root.name != name:
            raise self._error(f"root {self.root.name!r} cannot import {name!r} data")
        self.root.name = name
        self.declared = True

    def _active(self, what: str) -> RegistryKey:
        if self.current is None:
            raise self._error(f"{what} without key")
        return self.current

    def _directive(self, line: str) -> None:
        if line.startswith("#time="):
            key = self._active("#time")
            raw = line[len("#time="):]
            if not _TIME_RE.match(raw):
                raise self._error(f"invalid #time {raw!r}")
            try:
                key.modified = Filetime(int(raw, 16))
            except ValueError as e:
                raise self._error(f"invalid #time {raw!r}", e) from e
        elif line == "#link":
            self._active("#link").is_link = True
        # other directives (#arch=...) carry nothing we keep

    def _key_path(self, raw: str) -> str:
        try:
            return decode_key_path(raw, self.fmt)
        except WineRegError as e:
            e.with_context(line=self.lineno)
            raise

    def _key_header(self, line: str) -> None:
        m = _HEADER_RE.match(line)
        if m is None:
            raise self._error(f"malformed key header {line!r}")
        inner = m.group(1)

        if self.fmt is RegFormat.WINE:
            if not self.declared:
                raise self._error("key header before root directive")
            rel = self._key_path(inner)
            Log.trace(logger, "key %r", rel, line=self.lineno)
            self.current = self.root.add(rel)
            return

        deleting = inner.startswith("-")
        head, rest = split_root(self._key_path(inner[1:] if deleting else inner))
        name = canonical_root(head)
        if name is None:
            raise self._error(f"unknown root key {head!r}")
        if self.root.name and self.root.name != name:
            raise self._error(f"key {head!r} outside root {self.root.name!r}")
        self.root.name = name

        if deleting:
            # regedit "[-path]" removes the key; the root itself cannot go
            if rest:
                self.root.delete(rest)
            self.current = None
        else:
            Log.trace(logger, "key %r", rest, line=self.lineno)
            self.current = self.root.add(rest)

    def _read_continuation(self, line: str, it: Iterator[Tuple[int, str]]) -> str:
        # column-wrapped hex: "...,\" followed by indented lines
        while line.endswith("\\"):
            line = line[:-1]
            nxt = next(it, None)
            if nxt is None:
                break
            self.lineno, more = nxt
            line += more.strip()
        return line

    def _value_line(self, line: str) -> None:
        key = self._active("value")

        if line[0] == "@":
            name, i = "", 1
        else:
            try:
                name, i = read_quoted(line)
            except WineRegError as e:
                e.with_context(line=self.lineno)
                raise
        if line[i : i + 1] != "=":
            raise self._error(f"expected '=' after value name in {line!r}")
        raw = line[i + 1 :]

        if self.fmt is RegFormat.REGEDIT and raw == "-":
            key.delete_value(name)
            return

        try:
            data = decode(*split_value_data(raw))
        except WineRegError as e:
            e.with_context(line=self.lineno, value=name)
            raise
        key.values.append(RegistryValue(name, data))
        self.values += 1


def import_registry(key: RegistryKey, src: Source) -> RegistryKey:
    """
    Parse registry text from src into key (normally a fresh, unnamed root).

    Dump files name the root through their ';; All keys relative to'
    directive; interchange files through the first segment of each header.
    """
    return RegistryImporter(key).run(iter_lines(src))


def parse_registry(src: Source) -> RegistryKey:
    return import_registry(RegistryKey(), src)


def parse_registry_file(path: Union[str, Path]) -> RegistryKey:
    """Open and import one registry file. OSError propagates unchanged."""
    with open(path, "rb") as f:
        return parse_registry(f)
