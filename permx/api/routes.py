"""
Permx API Routes

FastAPI endpoints for administering group permission overrides:
- ListPermissions
- GetGroupPermissions
- SetGroupPermissionState
"""

from __future__ import annotations
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from datetime import datetime, timezone
import logging

from .. import __version__
from ..permissions.manager import PermissionManager
from ..schemas.permission import PermissionDescriptor, PermissionState


logger = logging.getLogger(__name__)


# =============================================================================
# API Models
# =============================================================================

class PermissionInfo(BaseModel):
    """A permission known to the catalog."""
    id: str
    module_id: str
    title: str
    description: str


class SetStateRequest(BaseModel):
    """Request to set or clear a group override."""
    state: PermissionState = Field(
        ...,
        description='"allow", "deny", or "" to fall back to the default state',
    )

    model_config = {
        "json_schema_extra": {
            "example": {"state": "allow"}
        }
    }


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str


# =============================================================================
# Router
# =============================================================================

router = APIRouter(prefix="/api/v1", tags=["Permissions"])

# Root manager; requests get their own derived instance
_manager: Optional[PermissionManager] = None


def set_permission_manager(manager: Optional[PermissionManager]) -> None:
    """Install the root permission manager (None resets to lazy defaults)."""
    global _manager
    _manager = manager


def get_root_manager() -> PermissionManager:
    """Get or create the root permission manager."""
    global _manager
    if _manager is None:
        from ..catalog import ModuleCatalog
        from ..config import get_config
        from ..persistence import get_override_store

        config = get_config()
        catalog = ModuleCatalog.from_import_paths(config.modules)
        if not catalog.list_modules():
            logger.warning("No permission modules configured; set PERMX_MODULES")

        _manager = PermissionManager(
            store=get_override_store(),
            catalog=catalog,
            caching_enabled=config.allow_caching,
        )
    return _manager


def get_permission_manager() -> PermissionManager:
    """Request-scoped manager with an empty access cache."""
    return get_root_manager().for_subject()


# =============================================================================
# Endpoints
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get(
    "/permissions",
    response_model=List[PermissionInfo],
    summary="List Permissions",
    description="List the permissions provided by all active modules.",
)
async def list_permissions(manager: PermissionManager = Depends(get_permission_manager)):
    return [
        PermissionInfo(
            id=p.id,
            module_id=p.module_id,
            title=p.title,
            description=p.description,
        )
        for p in manager.get_permissions()
    ]


@router.get(
    "/groups/{group_id}/permissions",
    response_model=List[PermissionDescriptor],
    response_model_by_alias=True,
    summary="Get Group Permissions",
    description="Describe every permission for a group, including its explicit override if any.",
)
async def get_group_permissions(
    group_id: str,
    manager: PermissionManager = Depends(get_permission_manager),
):
    return await manager.describe_permissions(group_id)


@router.put(
    "/groups/{group_id}/permissions/{module_id}/{permission_id}",
    response_model=PermissionDescriptor,
    response_model_by_alias=True,
    summary="Set Group Permission State",
    description='Override a permission for a group, or clear the override with state "".',
)
async def set_group_permission_state(
    group_id: str,
    module_id: str,
    permission_id: str,
    request: SetStateRequest,
    manager: PermissionManager = Depends(get_permission_manager),
):
    permission = manager.get_by_id(permission_id, module_id)
    if permission is None:
        raise HTTPException(status_code=404, detail="Permission not found")

    if not permission.can_change_state(group_id):
        logger.warning(f"Refused to change fixed permission {module_id}.{permission_id} for group {group_id}")
        raise HTTPException(status_code=403, detail="Permission state is fixed for this group")

    await manager.set_group_state(group_id, permission, request.state)

    state = await manager.get_group_state(group_id, permission, False)
    return PermissionDescriptor.build(permission, group_id, state)
