# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/registry/hive.py
"""
A prefix's registry: the machine and user key trees, each bound to the
dump file it was loaded from.

The runtime rewrites these files while it runs; callers must stop it
(wineserver -k / -w) around load()..save(). Nothing here locks or merges.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..config.config_loader import MACHINE_FILE, USER_FILE, RegistryConfig
from ..core.exceptions import RegistryPathError, format_error
from ..core.logger import Log
from ..core.logging_utils import log_step
from .encoding import RegFormat
from .export import export_file
from .key import HKCU, HKLM, RegistryKey, canonical_root, split_root
from .parser import parse_registry_file

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _load_hive(path: Path, expect: str) -> RegistryKey:
    log = Log.bind(logger, hive=path.name)
    with log_step(log, f"Loading {expect} from {path}"):
        key = parse_registry_file(path)
    if key.name != expect:
        raise format_error(f"{path} holds {key.name or 'no root'!r}, expected {expect!r}", path=str(path))
    return key


class Registry:
    def __init__(
        self,
        machine: RegistryKey,
        current_user: RegistryKey,
        *,
        machine_path: Optional[PathLike] = None,
        user_path: Optional[PathLike] = None,
        atomic_save: bool = True,
    ):
        self.machine = machine
        self.current_user = current_user
        self.machine_path = Path(machine_path) if machine_path is not None else None
        self.user_path = Path(user_path) if user_path is not None else None
        self.atomic_save = atomic_save

    @classmethod
    def load(cls, machine_path: PathLike, user_path: PathLike, *, atomic_save: bool = True) -> "Registry":
        """
        Parse both hive files. Either one missing or malformed fails the
        whole load.
        """
        mp, up = Path(machine_path), Path(user_path)
        machine = _load_hive(mp, HKLM)
        user = _load_hive(up, HKCU)
        return cls(machine, user, machine_path=mp, user_path=up, atomic_save=atomic_save)

    @classmethod
    def load_prefix(cls, prefix: PathLike) -> "Registry":
        p = Path(prefix)
        return cls.load(p / MACHINE_FILE, p / USER_FILE)

    @classmethod
    def from_config(cls, cfg: RegistryConfig) -> "Registry":
        return cls.load(cfg.machine_path, cfg.user_path, atomic_save=cfg.atomic_save)

    def keys(self) -> List[RegistryKey]:
        return [self.machine, self.current_user]

    def hive(self, name: str) -> RegistryKey:
        """Root key for a long or short root alias (HKEY_CURRENT_USER, HKCU, ...)."""
        root = canonical_root(name)
        if root == HKLM:
            return self.machine
        if root == HKCU:
            return self.current_user
        raise RegistryPathError(msg=f"unknown registry root {name!r}", context={"root": name})

    def query(self, path: str, *, create: bool = False) -> Optional[RegistryKey]:
        """
        Resolve an absolute path such as HKCU\\Software\\Wine. Returns None
        when the key does not exist, unless create is set.
        """
        head, rest = split_root(path)
        root = self.hive(head)
        if create:
            return root.add(rest)
        return root.query(rest)

    def save(self) -> None:
        """
        Rewrite both hive files in dump format, replacing their contents.
        A failure on the second file leaves the first one already written.
        """
        if self.machine_path is None or self.user_path is None:
            raise RegistryPathError(msg="registry has no backing files to save to")
        for key, path in ((self.machine, self.machine_path), (self.current_user, self.user_path)):
            with log_step(Log.bind(logger, hive=path.name), f"Saving {key.name} to {path}"):
                export_file(key, path, RegFormat.WINE, atomic=self.atomic_save)

    def __repr__(self) -> str:
        return f"Registry(machine={self.machine_path}, user={self.user_path})"
