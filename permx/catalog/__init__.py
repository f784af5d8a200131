"""Permx Catalog Module - Permission-providing modules and the identifier registry."""

from .modules import PermissionModule, ModuleCatalog, import_modules
from .registry import PermissionRegistry, identifier_for

__all__ = [
    "PermissionModule",
    "ModuleCatalog",
    "import_modules",
    "PermissionRegistry",
    "identifier_for",
]
