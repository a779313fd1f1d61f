# SPDX-License-Identifier: LGPL-3.0-or-later
import os
import sys
from pathlib import Path

import pytest

_THIS_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _THIS_DIR.parent

if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

os.environ.setdefault("PYTHONPATH", str(_REPO_ROOT))

from winereg.registry import (  # noqa: E402
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
    RegistryKey,
    RegistryValue,
    String,
    TypedBytes,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, self-contained unit tests")
    config.addinivalue_line("markers", "security: input-hardening tests")


# A user hive as the runtime writes it, except that Bar carries hex(7)/hex(2)
# values the runtime itself would have written as str(7)/str(2).
USER_HIVE = r'''WINE REGISTRY Version 2
;; All keys relative to REGISTRY\\User\\S-1-5-21-0-0-0-1000

#arch=win64

[] 1766588356
#time=1dc74e5dfeefd32
@=""
"Value A"="\"C:\\Foo\" -help"

[Foo] 1766410538
#time=1dc7347dc3ec40a
"Value B"=hex:de,ad,be,ef,00,00
"Value C"=dword:deadbeef
"Value D"=str(7):"C:\\Foo\0C:\\Bar\0"
"Value E"=str(2):"%APPDATA%\\Foo"

[Foo\\Bar] 1760553029
#time=1dc3e01c855469c
"Value F"=hex(b):ef,be,ad,de,00,00,00,00
"Value G"=hex(7):43,00,3a,00,5c,00,46,00,6f,00,6f,00,00,00,43,00,3a,00,5c,00,\
  42,00,61,00,72,00,00,00,00,00
"Value H"=hex(2):25,00,41,00,50,00,50,00,44,00,41,00,54,00,41,00,25,00,5c,00,\
  46,00,6f,00,6f,00,00,00
"Value I"=hex(1):48,00,69,00,00,00

[Foo\\Bar\\Baz] 1766586874
#time=1dc74e26c24986a
"Value J"=hex(4):78,56,34,12
"Value K"=hex(5):12,34,56,78
"Value L"=hex:
"Value M"=hex(ff):de

[Foo\\Quz] 1766592646
#time=1dc74efdcaf516c

[Foo\\Baz] 1766592646
#time=1dc74efdcc0807c
#link
"SymbolicLinkValue"=hex(6):46,00,6f,00,6f,00,5c,00,42,00,61,00,72,00,5c,00,42,\
  00,61,00,7a,00
'''

# USER_HIVE after one import/export cycle in dump format.
USER_HIVE_DUMP = r'''WINE REGISTRY Version 2
;; All keys relative to REGISTRY\\User\\S-1-5-21-0-0-0-1000

#arch=win64

[] 1766588356
#time=1dc74e5dfeefd32
@=""
"Value A"="\"C:\\Foo\" -help"

[Foo] 1766410538
#time=1dc7347dc3ec40a
"Value B"=hex:de,ad,be,ef,00,00
"Value C"=dword:deadbeef
"Value D"=str(7):"C:\\Foo\0C:\\Bar\0"
"Value E"=str(2):"%APPDATA%\\Foo"

[Foo\\Bar] 1760553029
#time=1dc3e01c855469c
"Value F"=hex(b):ef,be,ad,de,00,00,00,00
"Value G"=str(7):"C:\\Foo\0C:\\Bar\0"
"Value H"=str(2):"%APPDATA%\\Foo"
"Value I"=hex(1):48,00,69,00,00,00

[Foo\\Bar\\Baz] 1766586874
#time=1dc74e26c24986a
"Value J"=hex(4):78,56,34,12
"Value K"=hex(5):12,34,56,78
"Value L"=hex:
"Value M"=hex(000000ff):de

[Foo\\Quz] 1766592646
#time=1dc74efdcaf516c

[Foo\\Baz] 1766592646
#time=1dc74efdcc0807c
#link
"SymbolicLinkValue"=hex(6):46,00,6f,00,6f,00,5c,00,42,00,61,00,72,00,5c,00,42,\
  00,61,00,7a,00
'''

# The same tree in regedit form: no timestamps, no value-less keys, no links.
USER_HIVE_REGEDIT = r'''Windows Registry Editor Version 5.00

[HKEY_CURRENT_USER]
@=""
"Value A"="\"C:\\Foo\" -help"

[HKEY_CURRENT_USER\Foo]
"Value B"=hex:de,ad,be,ef,00,00
"Value C"=dword:deadbeef
"Value D"=hex(7):43,00,3a,00,5c,00,46,00,6f,00,6f,00,00,00,43,00,3a,00,5c,00,\
  42,00,61,00,72,00,00,00,00,00
"Value E"=hex(2):25,00,41,00,50,00,50,00,44,00,41,00,54,00,41,00,25,00,5c,00,\
  46,00,6f,00,6f,00,00,00

[HKEY_CURRENT_USER\Foo\Bar]
"Value F"=hex(b):ef,be,ad,de,00,00,00,00
"Value G"=hex(7):43,00,3a,00,5c,00,46,00,6f,00,6f,00,00,00,43,00,3a,00,5c,00,\
  42,00,61,00,72,00,00,00,00,00
"Value H"=hex(2):25,00,41,00,50,00,50,00,44,00,41,00,54,00,41,00,25,00,5c,00,\
  46,00,6f,00,6f,00,00,00
"Value I"=hex(1):48,00,69,00,00,00

[HKEY_CURRENT_USER\Foo\Bar\Baz]
"Value J"=hex(4):78,56,34,12
"Value K"=hex(5):12,34,56,78
"Value L"=hex:
"Value M"=hex(000000ff):de
'''

MACHINE_HIVE = r'''WINE REGISTRY Version 2
;; All keys relative to REGISTRY\\Machine

#arch=win64

[Software\\Foobar] 1760553029
#time=1dc3e01c855469c
"Foo"="Bar"
'''

USER_HIVE_SMALL = r'''WINE REGISTRY Version 2
;; All keys relative to REGISTRY\\User\\S-1-5-21-0-0-0-1000

#arch=win64

[Software\\Foobar] 1760553029
#time=1dc3e01c855469c
"Foo"="Bar"
'''


def build_user_tree() -> RegistryKey:
    """The tree USER_HIVE describes, built by hand."""
    foo = RegistryKey(
        "Foo",
        modified=Filetime(0x1DC7347DC3EC40A),
        values=[
            RegistryValue("Value B", Binary(b"\xde\xad\xbe\xef\x00\x00")),
            RegistryValue("Value C", Dword(0xDEADBEEF)),
            RegistryValue("Value D", MultiString(["C:\\Foo", "C:\\Bar"])),
            RegistryValue("Value E", ExpandString("%APPDATA%\\Foo")),
        ],
        subkeys=[
            RegistryKey(
                "Bar",
                modified=Filetime(0x1DC3E01C855469C),
                values=[
                    RegistryValue("Value F", Qword(0xDEADBEEF)),
                    RegistryValue("Value G", MultiString(["C:\\Foo", "C:\\Bar"])),
                    RegistryValue("Value H", ExpandString("%APPDATA%\\Foo")),
                    RegistryValue("Value I", BinaryString(b"H\x00i\x00\x00\x00")),
                ],
                subkeys=[
                    RegistryKey(
                        "Baz",
                        modified=Filetime(0x1DC74E26C24986A),
                        values=[
                            RegistryValue("Value J", DwordLE(0x12345678)),
                            RegistryValue("Value K", DwordBE(0x12345678)),
                            RegistryValue("Value L", Binary(b"")),
                            RegistryValue("Value M", TypedBytes(0xFF, b"\xde")),
                        ],
                    ),
                ],
            ),
            RegistryKey("Quz", modified=Filetime(0x1DC74EFDCAF516C)),
            RegistryKey(
                "Baz",
                modified=Filetime(0x1DC74EFDCC0807C),
                is_link=True,
                values=[RegistryValue("SymbolicLinkValue", Link("Foo\\Bar\\Baz"))],
            ),
        ],
    )
    return RegistryKey(
        "HKEY_CURRENT_USER",
        modified=Filetime(0x1DC74E5DFEEFD32),
        values=[
            RegistryValue("", String("")),
            RegistryValue("Value A", String('"C:\\Foo" -help')),
        ],
        subkeys=[foo],
    )


@pytest.fixture
def user_tree() -> RegistryKey:
    return build_user_tree()


@pytest.fixture
def prefix_dir(tmp_path: Path) -> Path:
    """A prefix directory holding small system.reg and user.reg files."""
    (tmp_path / "system.reg").write_text(MACHINE_HIVE, encoding="utf-8", newline="\n")
    (tmp_path / "user.reg").write_text(USER_HIVE_SMALL, encoding="utf-8", newline="\n")
    return tmp_path
