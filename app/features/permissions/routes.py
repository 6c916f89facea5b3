"""
Permission feature routes.
"""
from fastapi import APIRouter

from app.features.permissions.models import Permission, ROLE_PERMISSIONS
from app.features.permissions.schemas import RolePermissions


router = APIRouter(tags=["permissions"])


@router.get("/roles", response_model=list[RolePermissions])
async def list_roles():
    """List every role with the permissions it grants, strongest first."""
    return [
        RolePermissions(
            role=role,
            # Keep enum declaration order for a stable response
            permissions=[p for p in Permission if p in granted],
        )
        for role, granted in ROLE_PERMISSIONS.items()
    ]
