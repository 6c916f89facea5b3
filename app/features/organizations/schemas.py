"""
Pydantic schemas for organization-related requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, Field, EmailStr

from app.features.organizations.models import Plan
from app.features.permissions.models import Role


HEX_COLOR = "^#[0-9a-fA-F]{6}$"


# Organization Schemas
class OrganizationCreate(BaseModel):
    """Schema for creating a new organization. The caller becomes its owner."""
    name: str = Field(..., max_length=255)
    slug: str | None = Field(None, max_length=255, description="Defaults to a slug of the name")
    logo: str | None = Field(None, max_length=500)
    primary_color: str | None = Field(None, pattern=HEX_COLOR)
    custom_domain: str | None = Field(None, max_length=255)


class OrganizationUpdate(BaseModel):
    """
    Schema for updating organization settings.

    Only fields present in the request body are applied; an explicit null
    clears a nullable branding field.
    """
    name: str | None = Field(None, max_length=255)
    logo: str | None = Field(None, max_length=500)
    primary_color: str | None = Field(None, pattern=HEX_COLOR)
    custom_domain: str | None = Field(None, max_length=255)
    # Billing fields, require manage_billing
    plan: Plan | None = None
    max_documents: int | None = Field(None, ge=0)
    max_members: int | None = Field(None, ge=1)


class OrganizationResponse(BaseModel):
    """Schema for organization responses."""
    id: str
    name: str
    slug: str
    plan: Plan
    max_documents: int
    max_members: int
    logo: str | None = None
    primary_color: str | None = None
    custom_domain: str | None = None
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}


class OrganizationWithRole(OrganizationResponse):
    """Organization as seen by one of its members."""
    role: Role


# Invitation Schemas
class InvitationCreate(BaseModel):
    email: EmailStr
    role: Role = Field(default=Role.VIEWER, description="Role offered; owner cannot be offered")


class InvitationResponse(BaseModel):
    id: str
    organization_id: str
    email: str
    role: Role
    token: str
    expires_at: datetime
    created_by: str
    created_at: datetime
    
    model_config = {"from_attributes": True}
