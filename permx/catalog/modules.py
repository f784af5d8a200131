"""
Permx Module Catalog

Modules own permission definitions. The catalog enumerates the active
modules and registers each module's definitions with the registry.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union
import importlib
import logging

from ..schemas.permission import BasePermission
from .registry import PermissionRegistry


logger = logging.getLogger(__name__)


# =============================================================================
# Permission Module
# =============================================================================

class PermissionModule:
    """
    A module that provides permissions.

    Permissions may be given as BasePermission subclasses or instances.
    """
    id: str = ""
    permissions: Sequence[Union[type, BasePermission]] = ()

    def __init__(
        self,
        id: Optional[str] = None,
        permissions: Optional[Iterable[Union[type, BasePermission]]] = None,
    ):
        if id is not None:
            self.id = id
        if permissions is not None:
            self.permissions = tuple(permissions)
        if not self.id:
            raise ValueError(f"{type(self).__name__} requires an id")

    def get_permissions(self) -> List[BasePermission]:
        """Instantiate this module's permission definitions."""
        result = []
        for permission in self.permissions:
            if isinstance(permission, type):
                permission = permission()
            if permission.module_id != self.id:
                logger.warning(
                    f"Permission {permission.id} declares module {permission.module_id} "
                    f"but is provided by module {self.id}"
                )
            result.append(permission)
        return result

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id!r})>"


# =============================================================================
# Module Catalog
# =============================================================================

class ModuleCatalog:
    """
    Catalog of active modules.

    Usage:
        catalog = ModuleCatalog([ContentModule(), PermissionModule("user", [ViewProfile])])
        catalog.list_modules()
        catalog.registry.resolve("content.create_post")
    """

    def __init__(
        self,
        modules: Optional[Iterable[Any]] = None,
        registry: Optional[PermissionRegistry] = None,
    ):
        self.registry = registry if registry is not None else PermissionRegistry()
        self._modules: Dict[str, Any] = {}
        self._module_permissions: Dict[str, List[BasePermission]] = {}

        for module in modules or ():
            self.add_module(module)

    @classmethod
    def from_import_paths(cls, paths: Iterable[str]) -> "ModuleCatalog":
        """Build a catalog from ``package.module:attribute`` paths."""
        modules: List[Any] = []
        for path in paths:
            modules.extend(import_modules(path))
        return cls(modules)

    def add_module(self, module: Any) -> None:
        """Add a module and register its permissions."""
        module_id = getattr(module, "id", None)
        if not module_id:
            raise ValueError(f"Module has no id: {module!r}")
        if module_id in self._modules:
            raise ValueError(f"Module already registered: {module_id}")

        permissions = self.get_module_permissions(module)
        self._modules[module_id] = module
        self._module_permissions[module_id] = permissions

        for permission in permissions:
            self.registry.register_instance(permission)

        logger.debug(f"Registered module {module_id}")

    def list_modules(self) -> List[Any]:
        return list(self._modules.values())

    def get_module(self, module_id: str) -> Optional[Any]:
        return self._modules.get(module_id)

    @staticmethod
    def get_module_permissions(module: Any) -> List[BasePermission]:
        """Permissions provided by a module; non-permission modules provide none."""
        if isinstance(module, PermissionModule):
            return module.get_permissions()
        return []

    def permissions_of(self, module_id: str) -> List[BasePermission]:
        """Definitions of one module; an unknown module has none."""
        return list(self._module_permissions.get(module_id, ()))

    def build_permissions(self) -> List[BasePermission]:
        """Flatten all module permissions in module registration order."""
        permissions: List[BasePermission] = []
        for module_permissions in self._module_permissions.values():
            permissions.extend(module_permissions)
        return permissions


def import_modules(path: str) -> List[Any]:
    """
    Import the module(s) named by ``package.module:attribute``.

    The attribute may be a module instance, a module class (instantiated
    without arguments), or a factory returning one module or a list.
    A plain dotted path ``package.module.attribute`` is accepted as well.
    """
    module_name, sep, attribute = path.partition(":")
    if not sep:
        module_name, _, attribute = path.rpartition(".")
    if not module_name or not attribute:
        raise ValueError(f"Invalid permission module path: {path}")

    target = getattr(importlib.import_module(module_name), attribute)

    if isinstance(target, type) or (callable(target) and not hasattr(target, "id")):
        target = target()

    if hasattr(target, "id"):
        return [target]

    modules = list(target)
    logger.debug(f"Loaded {len(modules)} modules from {path}")
    return modules
