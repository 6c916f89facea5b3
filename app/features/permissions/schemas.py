"""
Pydantic schemas for the role/permission table.
"""
from pydantic import BaseModel, Field

from app.features.permissions.models import Permission, Role


class RolePermissions(BaseModel):
    """Permissions granted by one role."""
    role: Role
    permissions: list[Permission] = Field(default_factory=list)
