# SPDX-License-Identifier: LGPL-3.0-or-later
from .config_loader import RegistryConfig, load_config

__all__ = ["RegistryConfig", "load_config"]
