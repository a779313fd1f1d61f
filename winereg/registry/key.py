# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/registry/key.py
"""
In-memory registry key tree.

A RegistryKey owns its subkeys and values; the parent reference is a
back-pointer used only for path rendering and upward traversal. Value and
subkey order is preserved because both exporters write them in list order.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, TextIO, Tuple

from ..core.exceptions import RegistryPathError
from .encoding import RegFormat
from .filetime import ZERO, Filetime
from .values import RegistryData

SEP = "\\"

HKLM = "HKEY_LOCAL_MACHINE"
HKCU = "HKEY_CURRENT_USER"

ROOT_ALIASES = {
    "HKLM": HKLM,
    HKLM: HKLM,
    "HKCU": HKCU,
    HKCU: HKCU,
}


def canonical_root(name: str) -> Optional[str]:
    """Long root name for a long or short alias, None if unknown."""
    return ROOT_ALIASES.get(name.upper())


def split_root(path: str) -> Tuple[str, str]:
    """'HKCU\\Software\\Foo' -> ('HKCU', 'Software\\Foo')."""
    head, _, rest = path.partition(SEP)
    return head, rest


@dataclass
class RegistryValue:
    """A named value; the empty name is the key's (Default) value."""
    name: str
    data: RegistryData


class RegistryKey:
    def __init__(
        self,
        name: str = "",
        *,
        values: Optional[Iterable[RegistryValue]] = None,
        subkeys: Optional[Iterable["RegistryKey"]] = None,
        modified: Filetime = ZERO,
        is_link: bool = False,
    ) -> None:
        if SEP in name:
            raise ValueError(f"key name may not contain {SEP!r}: {name!r}")
        self.name = name
        self.values: List[RegistryValue] = list(values or ())
        self.subkeys: List[RegistryKey] = []
        self.modified = modified
        self.is_link = is_link
        self._parent: Optional[RegistryKey] = None
        for sk in subkeys or ():
            self._attach(sk)

    @classmethod
    def new(cls, path: str) -> "RegistryKey":
        """
        Build a detached tree for an absolute path and return its last key.
        The first segment names the root; HKLM/HKCU expand to the long form.
        """
        head, rest = split_root(path)
        root = cls(canonical_root(head) or head)
        return root.add(rest)

    def _attach(self, child: "RegistryKey") -> "RegistryKey":
        child._parent = self
        self.subkeys.append(child)
        return child

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def get_value(self, name: str) -> Optional[RegistryValue]:
        for v in self.values:
            if v.name == name:
                return v
        return None

    def set_value(self, name: str, data: RegistryData) -> RegistryValue:
        """
        Replace the data of an existing value in place, or append a new one.
        """
        v = self.get_value(name)
        if v is not None:
            v.data = data
            return v
        v = RegistryValue(name, data)
        self.values.append(v)
        return v

    def delete_value(self, name: str) -> bool:
        for i, v in enumerate(self.values):
            if v.name == name:
                del self.values[i]
                return True
        return False

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _query_path(self, path: str, create: bool) -> Optional["RegistryKey"]:
        if path == "":
            return self

        current = self
        for segment in path.split(SEP):
            # Newest match wins: a key reopened later in a stream is the
            # one subsequent lines refer to.
            for sk in reversed(current.subkeys):
                if sk.name == segment:
                    current = sk
                    break
            else:
                if not create:
                    return None
                current = current._attach(RegistryKey(segment))
        return current

    def add(self, path: str) -> "RegistryKey":
        """Find the key at path relative to self, creating missing keys."""
        key = self._query_path(path, True)
        assert key is not None
        return key

    def query(self, path: str) -> Optional["RegistryKey"]:
        """Find the key at path relative to self; None when absent."""
        return self._query_path(path, False)

    def delete(self, path: str) -> bool:
        """
        Detach the key at path from its parent. Returns False if not found.
        """
        key = self.query(path)
        if key is None:
            return False
        parent = key._parent
        if parent is None:
            raise RegistryPathError(msg=f"cannot delete root key {key.name!r}", context={"path": path})

        for i, sk in enumerate(parent.subkeys):
            if sk is key:
                del parent.subkeys[i]
                key._parent = None
                return True
        raise RuntimeError(f"subkey {key.name!r} traversed but missing from its parent")

    @property
    def parent(self) -> Optional["RegistryKey"]:
        return self._parent

    def root(self) -> "RegistryKey":
        cur = self
        while cur._parent is not None:
            cur = cur._parent
        return cur

    def _chain(self) -> List["RegistryKey"]:
        chain: List[RegistryKey] = []
        cur: Optional[RegistryKey] = self
        while cur is not None:
            chain.append(cur)
            cur = cur._parent
        chain.reverse()
        return chain

    def path(self) -> str:
        """Absolute path including the root, e.g. HKEY_CURRENT_USER\\Foo."""
        return SEP.join(k.name for k in self._chain())

    def relative_path(self, sep: str = SEP) -> str:
        """Path below the root; empty for the root itself."""
        return sep.join(k.name for k in self._chain()[1:])

    def walk(self) -> Iterator["RegistryKey"]:
        """Yield self and every descendant depth-first, in export order."""
        yield self
        for sk in self.subkeys:
            yield from sk.walk()

    def export(self, out: TextIO, fmt: RegFormat = RegFormat.REGEDIT) -> None:
        """Write this key and its subtree to out (see registry.export.export)."""
        from .export import export

        export(self, out, fmt)

    # ------------------------------------------------------------------
    # Structural equality (parent and identity are ignored)
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RegistryKey):
            return NotImplemented
        return (
            self.name == other.name
            and self.modified == other.modified
            and self.is_link == other.is_link
            and self.values == other.values
            and self.subkeys == other.subkeys
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"RegistryKey(name={self.name!r}, values={len(self.values)}, "
            f"subkeys={len(self.subkeys)}, modified={self.modified.ticks:#x}, is_link={self.is_link})"
        )
