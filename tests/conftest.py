"""Shared fixtures: a small module catalog and an instrumented store."""

import pytest

from permx.catalog import ModuleCatalog, PermissionModule
from permx.persistence.memory import InMemoryOverrideStore
from permx.schemas.permission import BasePermission, PermissionState


class ViewProfile(BasePermission):
    id = "view_profile"
    module_id = "user"
    title = "View profiles"
    description = "Allows viewing other users' profiles"
    default_allowed_groups = ("members",)


class ManageUsers(BasePermission):
    id = "manage_users"
    module_id = "admin"
    title = "Manage users"
    description = "Allows creating, editing and disabling users"
    default_allowed_groups = ("admins",)
    fixed_groups = ("admins",)


class CreatePost(BasePermission):
    id = "create_post"
    module_id = "content"
    title = "Create posts"
    description = "Allows creating posts in the stream"
    default_state = PermissionState.DENY


class CountingStore(InMemoryOverrideStore):
    """In-memory store that counts row lookups."""

    def __init__(self):
        super().__init__()
        self.get_calls = 0

    async def get(self, group_id, module_id, permission_id):
        self.get_calls += 1
        return await super().get(group_id, module_id, permission_id)


class ContentModule(PermissionModule):
    id = "content"
    permissions = (CreatePost,)


def staff_modules():
    return [PermissionModule("user", [ViewProfile]), PermissionModule("admin", [ManageUsers])]


class LegacyModule:
    """A module that does not provide permissions."""
    id = "legacy"


@pytest.fixture
def store():
    return CountingStore()


@pytest.fixture
def catalog():
    return ModuleCatalog([
        PermissionModule("user", [ViewProfile]),
        PermissionModule("admin", [ManageUsers]),
        PermissionModule("content", [CreatePost]),
        LegacyModule(),
    ])
