# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the registry value codec and string quoting."""
from __future__ import annotations

import pytest

from winereg.core.exceptions import RegistryEncodeError, RegistryFormatError
from winereg.registry.encoding import (
    RegFormat,
    decode,
    encode,
    parse_hex,
    quote,
    read_quoted,
    split_multi,
    split_value_data,
    unquote,
)
from winereg.registry.values import (
    UINT32_MAX,
    UINT64_MAX,
    Binary,
    BinaryString,
    Dword,
    DwordBE,
    DwordLE,
    ExpandString,
    Link,
    MultiString,
    Qword,
    String,
    TypedBytes,
)

SAMPLES = [
    String(""),
    String('"C:\\Foo" -help'),
    String("tab\tnew\nline\x01 ünï €"),
    String("emoji \U0001F600"),
    BinaryString(b""),
    BinaryString(b"H\x00i\x00\x00\x00"),
    ExpandString(""),
    ExpandString("%APPDATA%\\Foo"),
    MultiString([]),
    MultiString([""]),
    MultiString(["C:\\Foo", "C:\\Bar"]),
    MultiString(["a", "", "b"]),
    MultiString(["", "", ""]),
    Dword(0),
    Dword(UINT32_MAX),
    DwordLE(0),
    DwordLE(UINT32_MAX),
    DwordBE(0),
    DwordBE(UINT32_MAX),
    Qword(0),
    Qword(UINT64_MAX),
    Binary(b""),
    Binary(bytes(range(256))),
    Link(""),
    Link("\\Registry\\Machine\\Software\\Classes\\AppID"),
    Link("a\0"),
    Link("\0"),
    TypedBytes(0, b""),
    TypedBytes(0xFFFF0012, b"\x01\x02"),
]


@pytest.mark.unit
class TestValueCodecBijection:
    @pytest.mark.parametrize("fmt", [RegFormat.WINE, RegFormat.REGEDIT])
    @pytest.mark.parametrize("data", SAMPLES, ids=repr)
    def test_decode_inverts_encode(self, data, fmt):
        assert decode(*encode(data, fmt)) == data


@pytest.mark.unit
class TestEncode:
    def test_wire_tags(self):
        assert encode(String("x")) == ("", '"x"')
        assert encode(Dword(0xDEADBEEF)) == ("dword", "deadbeef")
        assert encode(Dword(1)) == ("dword", "00000001")
        assert encode(Qword(0xDEADBEEF)) == ("hex(b)", b"\xef\xbe\xad\xde\x00\x00\x00\x00")
        assert encode(DwordLE(0x12345678)) == ("hex(4)", b"\x78\x56\x34\x12")
        assert encode(DwordBE(0x12345678)) == ("hex(5)", b"\x12\x34\x56\x78")
        assert encode(Link("ab")) == ("hex(6)", b"a\x00b\x00")
        assert encode(TypedBytes(0xFF, b"\xde")) == ("hex(000000ff)", b"\xde")

    def test_strings_differ_between_formats(self):
        assert encode(ExpandString("%A%"), RegFormat.WINE) == ("str(2)", '"%A%"')
        assert encode(ExpandString("%A%"), RegFormat.REGEDIT) == ("hex(2)", "%A%\0".encode("utf-16-le"))
        assert encode(MultiString(["a", "b"]), RegFormat.WINE) == ("str(7)", '"a\\0b\\0"')
        assert encode(MultiString(["a", "b"]), RegFormat.REGEDIT) == ("hex(7)", "a\0b\0\0".encode("utf-16-le"))

    @pytest.mark.parametrize("bad", [None, "plain str", 42, b"raw", ["a", "b"], 1.5])
    def test_rejects_host_values_outside_closed_set(self, bad):
        with pytest.raises(RegistryEncodeError):
            encode(bad)  # type: ignore[arg-type]


@pytest.mark.unit
class TestDecode:
    def test_hex_text_payloads(self):
        assert decode("hex", "de,ad,be,ef,00,00") == Binary(b"\xde\xad\xbe\xef\x00\x00")
        assert decode("hex", "") == Binary(b"")
        assert decode("hex(3)", "01") == Binary(b"\x01")
        assert decode("hex(b)", "ef,be,ad,de,00,00,00,00") == Qword(0xDEADBEEF)
        assert decode("hex(B)", "ef,be,ad,de,00,00,00,00") == Qword(0xDEADBEEF)
        assert decode("hex(ff)", "de") == TypedBytes(0xFF, b"\xde")
        assert decode("hex(ffff0012)", "") == TypedBytes(0xFFFF0012, b"")

    def test_hex7_strips_double_terminator(self):
        raw = ",".join(f"{b:02x}" for b in "C:\\Foo\0C:\\Bar\0\0".encode("utf-16-le"))
        assert decode("hex(7)", raw) == MultiString(["C:\\Foo", "C:\\Bar"])

    def test_str7_and_str2(self):
        assert decode("str(7)", '"C:\\\\Foo\\0C:\\\\Bar\\0"') == MultiString(["C:\\Foo", "C:\\Bar"])
        assert decode("str(2)", '"%APPDATA%\\\\Foo"') == ExpandString("%APPDATA%\\Foo")

    @pytest.mark.parametrize(
        "tag,payload",
        [
            ("str(9)", '""'),
            ("qword", "00"),
            ("hex(123456789)", "00"),
            ("hex(zz)", "00"),
            ("hexy", "00"),
            ("dword", "xyz"),
            ("dword", "100000000"),
            ("dword", ""),
            ("hex", "de,zz"),
            ("hex", "123"),
            ("hex(4)", "01,02,03"),
            ("hex(5)", "01,02,03,04,05"),
            ("hex(b)", "01"),
            ("hex(2)", "41"),
            ("", "unquoted"),
            ("", '"dangling\\"'),
            ("", '"bad \\q escape"'),
        ],
    )
    def test_malformed_is_format_error(self, tag, payload):
        with pytest.raises(RegistryFormatError):
            decode(tag, payload)


@pytest.mark.unit
class TestQuoting:
    def test_quote_escapes(self):
        assert quote('"C:\\Foo" -help') == '"\\"C:\\\\Foo\\" -help"'
        assert quote("a\nb\tc") == '"a\\nb\\tc"'
        assert quote("\x01\x7f") == '"\\x01\\x7f"'
        assert quote("é") == '"é"'
        assert quote("\u200b") == '"\\u200b"'

    def test_unquote_accepts_all_escape_forms(self):
        assert unquote('"\\a\\b\\f\\n\\r\\t\\v\\\\\\"\\\'"') == "\a\b\f\n\r\t\v\\\"'"
        assert unquote('"\\x41\\u00e9\\U0001F600\\101"') == "Aé\U0001F600A"
        assert unquote('"nul\\0end"') == "nul\0end"

    def test_split_multi_keeps_embedded_empty_strings(self):
        assert split_multi('"a\\0\\0b\\0"') == ["a", "", "b"]
        assert split_multi('""') == []
        assert split_multi('"\\0"') == [""]
        # escaped backslash followed by a literal zero is not a separator
        assert split_multi('"x\\\\0\\0"') == ["x\\0"]

    def test_read_quoted(self):
        line = '"we\\"ird=name"=dword:00000001'
        name, end = read_quoted(line)
        assert name == 'we"ird=name'
        assert line[end:] == "=dword:00000001"

    def test_read_quoted_unterminated(self):
        with pytest.raises(RegistryFormatError):
            read_quoted('"never closed')


@pytest.mark.unit
class TestHelpers:
    def test_parse_hex_stops_at_continuation_marker(self):
        assert parse_hex("01,02,\\") == b"\x01\x02"
        assert parse_hex("01, 02 ,03") == b"\x01\x02\x03"

    def test_split_value_data(self):
        assert split_value_data('"str:with colon"') == ("", '"str:with colon"')
        assert split_value_data('str(2):"a:b"') == ("str(2)", '"a:b"')
        assert split_value_data("hex:") == ("hex", "")

    @pytest.mark.parametrize("raw", ["", "nocolon", ":00"])
    def test_split_value_data_errors(self, raw):
        with pytest.raises(RegistryFormatError):
            split_value_data(raw)

    def test_value_types_validate_ranges(self):
        with pytest.raises(ValueError):
            Dword(UINT32_MAX + 1)
        with pytest.raises(ValueError):
            Qword(-1)
        with pytest.raises(TypeError):
            DwordLE(True)


@pytest.mark.unit
class TestUtf16Terminators:
    def test_link_keeps_trailing_nul(self):
        assert decode("hex(6)", "61,00,00,00") == Link("a\0")
        assert decode("hex(6)", "61,00") == Link("a")

    def test_expand_and_multi_drop_one_terminator(self):
        assert decode("hex(2)", "61,00,00,00") == ExpandString("a")
        assert decode("hex(2)", "61,00,00,00,00,00") == ExpandString("a\0")
        assert decode("hex(7)", "61,00,00,00,00,00") == MultiString(["a"])
