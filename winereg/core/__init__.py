# winereg/core/__init__.py
from .exceptions import RegistryEncodeError, RegistryFormatError, RegistryPathError, WineRegError

__all__ = ["WineRegError", "RegistryFormatError", "RegistryEncodeError", "RegistryPathError"]
