"""Permx Schemas Package - Permission definitions, overrides and subjects."""

from .permission import (
    PermissionState,
    BasePermission,
    GroupOverride,
    Group,
    GroupRef,
    Subject,
    PermissionDescriptor,
    PermissionRef,
    PermissionRefs,
    group_id_of,
)

__all__ = [
    "PermissionState",
    "BasePermission",
    "GroupOverride",
    "Group",
    "GroupRef",
    "Subject",
    "PermissionDescriptor",
    "PermissionRef",
    "PermissionRefs",
    "group_id_of",
]
