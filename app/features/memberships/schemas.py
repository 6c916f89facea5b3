"""
Pydantic schemas for organization memberships.
"""
from datetime import datetime
from pydantic import BaseModel, Field

from app.features.permissions.models import Role


class MemberAdd(BaseModel):
    """Schema for adding a user to an organization directly."""
    user_id: str = Field(..., min_length=1, max_length=255, description="Identity provider user id")
    role: Role = Field(default=Role.VIEWER, description="Role in the organization; owner cannot be granted")


class MembershipResponse(BaseModel):
    id: str
    organization_id: str
    user_id: str
    role: Role
    created_at: datetime
    
    model_config = {"from_attributes": True}
