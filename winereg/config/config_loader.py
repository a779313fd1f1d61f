# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/config/config_loader.py
"""Settings for locating and writing a prefix's registry hives."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..core.logger import Log

logger = logging.getLogger(__name__)

MACHINE_FILE = "system.reg"
USER_FILE = "user.reg"


@dataclass
class RegistryConfig:
    prefix: Path
    machine_file: str = MACHINE_FILE
    user_file: str = USER_FILE
    atomic_save: bool = True
    log_level: str = "INFO"

    @property
    def machine_path(self) -> Path:
        return self.prefix / self.machine_file

    @property
    def user_path(self) -> Path:
        return self.prefix / self.user_file

    def setup_logging(self, **kw: Any) -> logging.Logger:
        """Show winereg log records at log_level; kw goes to Log.setup."""
        return Log.setup(self.log_level, **kw)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, base: Optional[Path] = None) -> "RegistryConfig":
        """
        Build a config from a mapping; unknown keys are ignored.

        A relative prefix is resolved against base (the config file's
        directory) when given.
        """
        known = {f.name for f in fields(cls)}
        kw = {k: v for k, v in data.items() if k in known}

        if "prefix" not in kw or not str(kw["prefix"]).strip():
            raise ValueError("registry config needs a 'prefix' directory")
        prefix = Path(str(kw["prefix"])).expanduser()
        if base is not None and not prefix.is_absolute():
            prefix = base / prefix
        kw["prefix"] = prefix

        for name in ("machine_file", "user_file", "log_level"):
            if name in kw and not isinstance(kw[name], str):
                raise ValueError(f"'{name}' must be a string, got {type(kw[name]).__name__}")
        if "log_level" in kw:
            Log.level_from_name(kw["log_level"])
        if "atomic_save" in kw and not isinstance(kw["atomic_save"], bool):
            raise ValueError("'atomic_save' must be true or false")

        return cls(**kw)


def _read_structured_file(path: Path) -> Dict[str, Any]:
    """
    Read a JSON/YAML file into a dict.

    Supported:
      - *.json
      - *.yml / *.yaml
      - no suffix: JSON first, then YAML
    """
    sfx = path.suffix.lower()
    raw = path.read_text(encoding="utf-8")
    if sfx == ".json":
        parsed = json.loads(raw)
    elif sfx in (".yml", ".yaml"):
        parsed = yaml.safe_load(raw)
    else:
        try:
            parsed = json.loads(raw)
        except ValueError:
            parsed = yaml.safe_load(raw)
    if not isinstance(parsed, dict):
        raise ValueError("top-level config must be a mapping/object (dict)")
    return parsed


def load_config(path: Union[str, Path]) -> RegistryConfig:
    """
    Load RegistryConfig from a JSON or YAML file.

    Settings may sit at the top level or under a 'registry:' key.
    """
    p = Path(path).expanduser()
    data = _read_structured_file(p)
    section = data.get("registry")
    if isinstance(section, dict):
        data = section
    cfg = RegistryConfig.from_dict(data, base=p.parent)
    logger.debug("Loaded registry config from %s (prefix=%s)", p, cfg.prefix)
    return cfg
