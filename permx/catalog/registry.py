"""
Permx Permission Registry

Maps stable string identifiers to permission constructors.
"""

from __future__ import annotations
from typing import Callable, Dict, List, Optional
import logging

from ..exceptions import ResolutionError
from ..schemas.permission import BasePermission, PermissionRef


logger = logging.getLogger(__name__)


PermissionFactory = Callable[[], BasePermission]


def identifier_for(permission: BasePermission) -> str:
    """Default registry identifier: ``<module_id>.<permission_id>``."""
    return f"{permission.module_id}.{permission.id}"


class PermissionRegistry:
    """
    Explicit identifier -> constructor mapping.

    Usage:
        registry = PermissionRegistry()

        @registry.permission("content.create_post")
        class CreatePost(BasePermission):
            ...

        registry.resolve("content.create_post")
    """

    def __init__(self):
        self._factories: Dict[str, PermissionFactory] = {}

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def identifiers(self) -> List[str]:
        return list(self._factories)

    def register(self, identifier: str, factory: PermissionFactory) -> None:
        """Register a constructor. Re-registering the same identifier replaces it."""
        if identifier in self._factories:
            logger.debug(f"Replacing permission factory for {identifier}")
        self._factories[identifier] = factory

    def register_instance(self, permission: BasePermission, identifier: Optional[str] = None) -> str:
        """Register an already built definition; definitions are immutable so it is shared."""
        identifier = identifier or identifier_for(permission)
        self.register(identifier, lambda: permission)
        return identifier

    def permission(self, identifier: str):
        """Class decorator form of :meth:`register`."""
        def decorator(cls):
            self.register(identifier, cls)
            return cls
        return decorator

    def unregister(self, identifier: str) -> bool:
        return self._factories.pop(identifier, None) is not None

    def create(self, identifier: str) -> BasePermission:
        """Instantiate a permission by identifier."""
        factory = self._factories.get(identifier)
        if factory is None:
            raise ResolutionError(identifier)
        return self._build(identifier, factory)

    def resolve(self, reference: PermissionRef) -> BasePermission:
        """
        Resolve a permission reference to a definition.

        Accepts a definition instance, a BasePermission subclass, or a
        registered identifier.

        Raises:
            ResolutionError: If the reference cannot be located or built
        """
        if isinstance(reference, BasePermission):
            return reference

        if isinstance(reference, type) and issubclass(reference, BasePermission):
            return self._build(reference.__qualname__, reference)

        if isinstance(reference, str):
            return self.create(reference)

        raise ResolutionError(reference, "not a permission reference")

    @staticmethod
    def _build(reference, factory: PermissionFactory) -> BasePermission:
        try:
            permission = factory()
        except (TypeError, ValueError) as e:
            raise ResolutionError(reference, f"cannot instantiate ({e})") from e

        if not isinstance(permission, BasePermission):
            raise ResolutionError(reference, "factory did not return a permission")
        return permission
