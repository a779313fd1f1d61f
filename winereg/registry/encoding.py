# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/registry/encoding.py
"""
Registry value codec.

Provides:
- C-style string quoting/unquoting used by quoted value data and names
- UTF-16LE helpers for hex(2)/hex(6)/hex(7) payloads
- encode(data, fmt) -> (tag, payload) and decode(tag, payload) -> data

A tag is the wire prefix without its colon ("dword", "str(2)", "hex(7)",
...). Quoted REG_SZ data has the empty tag. Payloads are text for the
textual forms and bytes for every hex form; decode also accepts the
comma-separated hex text straight off a value line.
"""
from __future__ import annotations

import re
import struct
from enum import Enum
from typing import Iterator, List, Tuple, Union

from ..core.exceptions import encode_error, format_error
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
    UINT32_MAX,
)


class RegFormat(Enum):
    WINE = "wine"  # runtime dump (system.reg / user.reg)
    REGEDIT = "regedit"  # interchange export


HEADER_WINE = "WINE REGISTRY Version 2"
HEADER_REGEDIT = "Windows Registry Editor Version 5.00"

Payload = Union[str, bytes]

_VENDOR_TAG_RE = re.compile(r"^hex\(([0-9a-f]{1,8})\)$")
_HEX_DIGITS_RE = re.compile(r"^[0-9a-fA-F]+$")
_HEX_BYTE_RE = re.compile(r"^[0-9a-fA-F]{1,2}$")

# ---------------------------------------------------------------------------
# C-style quoting
# ---------------------------------------------------------------------------

_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}
_UNESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
}
_OCTAL = "01234567"

# Yielded by _scan_escaped for a bare \0 when splitting REG_MULTI_SZ text.
_NUL_SEP = object()


def escape(s: str) -> str:
    """Escape s for use between double quotes; printable text passes through."""
    out: List[str] = []
    for ch in s:
        esc = _ESCAPES.get(ch)
        if esc is not None:
            out.append(esc)
        elif ch.isprintable():
            out.append(ch)
        else:
            cp = ord(ch)
            if cp < 0x80:
                out.append(f"\\x{cp:02x}")
            elif cp < 0x10000:
                out.append(f"\\u{cp:04x}")
            else:
                out.append(f"\\U{cp:08x}")
    return "".join(out)


def quote(s: str) -> str:
    return '"' + escape(s) + '"'


def _is_octal(s: str, width: int = 2) -> bool:
    return len(s) == width and all(c in _OCTAL for c in s)


def _hex_escape(s: str, i: int, width: int) -> str:
    digits = s[i : i + width]
    if len(digits) != width or not _HEX_DIGITS_RE.match(digits):
        raise format_error(f"invalid \\{s[i - 1]} escape in {s!r}")
    return chr(int(digits, 16))


def _scan_escaped(s: str, *, multi: bool) -> Iterator[object]:
    i, n = 0, len(s)
    while i < n:
        ch = s[i]
        if ch != "\\":
            yield ch
            i += 1
            continue
        if i + 1 >= n:
            raise format_error(f"dangling backslash in {s!r}")
        nxt = s[i + 1]
        i += 2
        if nxt in _UNESCAPES:
            yield _UNESCAPES[nxt]
        elif nxt == "x":
            yield _hex_escape(s, i, 2)
            i += 2
        elif nxt == "u":
            yield _hex_escape(s, i, 4)
            i += 4
        elif nxt == "U":
            yield _hex_escape(s, i, 8)
            i += 8
        elif nxt == "0" and (multi or not _is_octal(s[i : i + 2])):
            # bare \0: separator inside str(7), NUL elsewhere
            yield _NUL_SEP if multi else "\0"
        elif nxt in _OCTAL:
            digits = s[i - 1 : i + 2]
            if not _is_octal(digits, 3):
                raise format_error(f"invalid octal escape in {s!r}")
            yield chr(int(digits, 8))
            i += 2
        else:
            raise format_error(f"invalid escape \\{nxt} in {s!r}")


def _strip_quotes(s: str) -> str:
    if len(s) < 2 or s[0] != '"' or s[-1] != '"':
        raise format_error(f"expected quoted string, got {s!r}")
    return s[1:-1]


def unescape(s: str) -> str:
    return "".join(str(c) for c in _scan_escaped(s, multi=False))


def unquote(s: str) -> str:
    return unescape(_strip_quotes(s))


def split_multi(s: str) -> List[str]:
    """
    Split quoted str(7) text: "foo\\0bar\\0" -> ["foo", "bar"].
    """
    parts: List[str] = []
    cur: List[str] = []
    for c in _scan_escaped(_strip_quotes(s), multi=True):
        if c is _NUL_SEP:
            parts.append("".join(cur))
            cur = []
        else:
            cur.append(str(c))
    parts.append("".join(cur))
    # the list is \0-terminated, so the final piece is always the empty tail
    return parts[:-1]


def join_multi(values: Tuple[str, ...]) -> str:
    return '"' + "".join(escape(v) + "\\0" for v in values) + '"'


# ---------------------------------------------------------------------------
# UTF-16LE
# ---------------------------------------------------------------------------


def encode_w(s: str) -> bytes:
    return s.encode("utf-16-le", errors="surrogatepass")


def decode_w(raw: bytes, *, terminated: bool = True) -> str:
    """
    Decode UTF-16LE. With terminated=True (hex(2), hex(7)) a single trailing
    NUL is the terminator and is dropped; hex(6) link targets have none.
    """
    if len(raw) % 2:
        raise format_error(f"odd UTF-16 payload length {len(raw)}")
    s = raw.decode("utf-16-le", errors="surrogatepass")
    if terminated and s.endswith("\0"):
        s = s[:-1]
    return s


def _encode_multi_w(values: Tuple[str, ...]) -> bytes:
    if not values:
        return encode_w("\0")
    return encode_w("\0".join(values) + "\0\0")


def _decode_multi_w(raw: bytes) -> List[str]:
    # foo\0bar\0\0 -> foo\0bar\0 -> [foo, bar, ""]
    return decode_w(raw).split("\0")[:-1]


# ---------------------------------------------------------------------------
# Hex payloads
# ---------------------------------------------------------------------------


def parse_hex(text: str) -> bytes:
    """Parse "de,ad,be,ef" (continuations already joined) into bytes."""
    buf = bytearray()
    for tok in text.split(","):
        tok = tok.strip()
        if not tok:
            continue
        if tok[0] == "\\":
            break
        if not _HEX_BYTE_RE.match(tok):
            raise format_error(f"invalid hex byte {tok!r}")
        buf.append(int(tok, 16))
    return bytes(buf)


def _fixed(tag: str, raw: bytes, size: int) -> bytes:
    if len(raw) != size:
        raise format_error(f"{tag} needs {size} bytes, got {len(raw)}")
    return raw


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def encode(data: RegistryData, fmt: RegFormat = RegFormat.WINE) -> Tuple[str, Payload]:
    """
    Encode registry data to its wire (tag, payload) pair.

    Expandable and multi strings use the quoted str(2)/str(7) forms in the
    runtime dump and UTF-16LE hex(2)/hex(7) in the interchange format.
    """
    wine = fmt is RegFormat.WINE
    if isinstance(data, String):
        return "", quote(data.value)
    if isinstance(data, ExpandString):
        if wine:
            return "str(2)", quote(data.value)
        return "hex(2)", encode_w(data.value + "\0")
    if isinstance(data, MultiString):
        if wine:
            return "str(7)", join_multi(data.values)
        return "hex(7)", _encode_multi_w(data.values)
    if isinstance(data, Dword):
        return "dword", f"{data.value:08x}"
    if isinstance(data, Qword):
        return "hex(b)", struct.pack("<Q", data.value)
    if isinstance(data, Binary):
        return "hex", data.data
    if isinstance(data, BinaryString):
        return "hex(1)", data.data
    if isinstance(data, DwordLE):
        return "hex(4)", struct.pack("<I", data.value)
    if isinstance(data, DwordBE):
        return "hex(5)", struct.pack(">I", data.value)
    if isinstance(data, Link):
        return "hex(6)", encode_w(data.target)
    if isinstance(data, TypedBytes):
        return f"hex({data.identifier:08x})", data.data
    raise encode_error(f"unhandled registry value type: {type(data).__name__}", type=type(data).__name__)


def _text(tag: str, payload: Payload) -> str:
    if not isinstance(payload, str):
        raise format_error(f"{tag or 'string'} payload must be text")
    return payload


def decode(tag: str, payload: Payload) -> RegistryData:
    """
    Decode a wire (tag, payload) pair. Raises RegistryFormatError on an
    unknown tag or a malformed payload.
    """
    t = tag.strip().lower()
    if t == "":
        return String(unquote(_text(tag, payload)))
    if t == "dword":
        digits = _text(tag, payload).strip()
        if not _HEX_DIGITS_RE.match(digits) or int(digits, 16) > UINT32_MAX:
            raise format_error(f"invalid dword {digits!r}")
        return Dword(int(digits, 16))
    if t == "str(2)":
        return ExpandString(unquote(_text(tag, payload)))
    if t == "str(7)":
        return MultiString(split_multi(_text(tag, payload)))

    if not t.startswith("hex"):
        raise format_error(f"unhandled data type: {tag}", tag=tag)

    raw = payload if isinstance(payload, bytes) else parse_hex(payload)
    if t in ("hex", "hex(3)"):
        return Binary(raw)
    if t == "hex(1)":
        return BinaryString(raw)
    if t == "hex(2)":
        return ExpandString(decode_w(raw))
    if t == "hex(4)":
        return DwordLE(struct.unpack("<I", _fixed(t, raw, 4))[0])
    if t == "hex(5)":
        return DwordBE(struct.unpack(">I", _fixed(t, raw, 4))[0])
    if t == "hex(6)":
        return Link(decode_w(raw, terminated=False))
    if t == "hex(7)":
        return MultiString(_decode_multi_w(raw))
    if t == "hex(b)":
        return Qword(struct.unpack("<Q", _fixed(t, raw, 8))[0])

    m = _VENDOR_TAG_RE.match(t)
    if m is None:
        raise format_error(f"unsupported hex type: {tag}", tag=tag)
    return TypedBytes(int(m.group(1), 16), raw)


def split_value_data(raw: str) -> Tuple[str, str]:
    """
    Split the data half of a value line into (tag, payload).

    Quoted data has no tag; otherwise the tag ends at the first colon.
    """
    if not raw:
        raise format_error("expected data")
    if raw[0] == '"':
        return "", raw
    i = raw.find(":")
    if i <= 0:
        raise format_error(f"missing type tag in {raw!r}")
    return raw[:i], raw[i + 1 :]


def read_quoted(line: str, start: int = 0) -> Tuple[str, int]:
    """
    Read the quoted string beginning at line[start]; returns the unescaped
    text and the index just past the closing quote.
    """
    if start >= len(line) or line[start] != '"':
        raise format_error(f"expected quoted string in {line!r}")
    i = start + 1
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return unescape(line[start + 1 : i]), i + 1
        i += 1
    raise format_error(f"unterminated quoted string in {line!r}")

