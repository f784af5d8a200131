"""
Permx Permission Schemas

Permission definitions, group overrides and permission subjects.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Permission State
# =============================================================================

class PermissionState(str, Enum):
    """
    State of a permission for a group.

    DEFAULT is the absence sentinel: it is never persisted and means
    "inherit the definition's default state".
    """
    ALLOW = "allow"
    DENY = "deny"
    DEFAULT = ""

    @property
    def label(self) -> str:
        return _STATE_LABELS[self]

    @classmethod
    def normalize(cls, value: Union["PermissionState", str, None]) -> "PermissionState":
        """Coerce a raw state value, treating None and "" as DEFAULT."""
        if value is None:
            return cls.DEFAULT
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Invalid permission state: {value!r}") from None


_STATE_LABELS = {
    PermissionState.ALLOW: "Allow",
    PermissionState.DENY: "Deny",
    PermissionState.DEFAULT: "Default",
}


# =============================================================================
# Permission Definition
# =============================================================================

class BasePermission:
    """
    Immutable descriptor of one capability owned by a module.

    Subclasses declare the definition as class attributes:

        class CreatePost(BasePermission):
            id = "create_post"
            module_id = "content"
            title = "Create post"
            default_allowed_groups = ("members",)

    Keyword arguments override class attributes for ad-hoc definitions.
    """
    id: str = ""
    module_id: str = ""
    title: str = ""
    description: str = ""

    # State used when no override exists and the group is not default-allowed
    default_state: PermissionState = PermissionState.DENY
    default_allowed_groups: Tuple[str, ...] = ()

    # Groups whose state cannot be changed by administrators
    fixed_groups: Tuple[str, ...] = ()

    def __init__(self, **attributes: Any):
        for name, value in attributes.items():
            if name.startswith("_") or not hasattr(type(self), name):
                raise TypeError(f"Unknown permission attribute: {name}")
            if name in ("default_allowed_groups", "fixed_groups"):
                value = tuple(value)
            object.__setattr__(self, name, value)

        if not self.id or not self.module_id:
            raise ValueError(f"{type(self).__name__} requires both id and module_id")

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BasePermission):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(module_id={self.module_id!r}, id={self.id!r})>"

    @property
    def key(self) -> Tuple[str, str]:
        """Identity key of the definition."""
        return (self.module_id, self.id)

    @property
    def class_name(self) -> str:
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"

    def has_id(self, permission_id: str) -> bool:
        return self.id == permission_id

    def get_default_state(self, group_id: str) -> PermissionState:
        """Return the state applied to a group that has no override."""
        if group_id in self.default_allowed_groups:
            return PermissionState.ALLOW
        return PermissionState.normalize(self.default_state)

    def can_change_state(self, group_id: str) -> bool:
        """Check if administrators may override this permission for a group."""
        return group_id not in self.fixed_groups


# =============================================================================
# Group Override
# =============================================================================

@dataclass
class GroupOverride:
    """Persisted group-level state for one permission."""
    group_id: str
    module_id: str
    permission_id: str
    state: PermissionState
    permission_class: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.group_id, self.module_id, self.permission_id)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "group_id": self.group_id,
            "module_id": self.module_id,
            "permission_id": self.permission_id,
            "state": self.state.value,
            "permission_class": self.permission_class,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GroupOverride":
        """Create from dictionary."""
        return cls(
            group_id=data["group_id"],
            module_id=data["module_id"],
            permission_id=data["permission_id"],
            state=PermissionState(data["state"]),
            permission_class=data.get("permission_class"),
        )


# =============================================================================
# Subjects
# =============================================================================

@dataclass(frozen=True)
class Group:
    """A group reference; only the id takes part in resolution."""
    id: str
    name: Optional[str] = None


GroupRef = Union[str, Group]


def group_id_of(group: Any) -> str:
    """Reduce a group reference to its id."""
    if isinstance(group, str):
        return group
    return getattr(group, "id")


@dataclass
class Subject:
    """An entity with an ordered list of group memberships."""
    id: str
    groups: List[GroupRef] = field(default_factory=list)

    @property
    def group_ids(self) -> List[str]:
        return [group_id_of(group) for group in self.groups]


# =============================================================================
# Descriptors
# =============================================================================

class PermissionDescriptor(BaseModel):
    """Serializable view of one permission for one group."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    module_id: str = Field(alias="moduleId")
    permission_id: str = Field(alias="permissionId")
    default_state: str = Field(alias="defaultState")
    deny_state: str = Field(alias="denyState")
    allow_state: str = Field(alias="allowState")
    changeable: bool
    current_state: PermissionState = Field(alias="currentState")

    @classmethod
    def build(
        cls,
        permission: BasePermission,
        group_id: str,
        current_state: PermissionState,
    ) -> "PermissionDescriptor":
        default_label = permission.get_default_state(group_id).label
        return cls(
            id=permission.id,
            title=permission.title,
            description=permission.description,
            module_id=permission.module_id,
            permission_id=permission.id,
            default_state=f"{PermissionState.DEFAULT.label} - {default_label}",
            deny_state=PermissionState.DENY.label,
            allow_state=PermissionState.ALLOW.label,
            changeable=permission.can_change_state(group_id),
            current_state=current_state,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


PermissionRef = Union[BasePermission, type, str]
PermissionRefs = Union[PermissionRef, Sequence[PermissionRef]]
