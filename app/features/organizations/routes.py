"""
Organization feature routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, status

from app.features.users.dependencies import get_current_user_id
from app.features.organizations.models import Organization
from app.features.organizations.schemas import (
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationResponse,
    OrganizationWithRole,
    InvitationCreate,
    InvitationResponse,
)
from app.features.organizations.dependencies import get_organization_directory
from app.features.organizations.service import OrganizationDirectory
from app.features.permissions.models import Role


router = APIRouter(tags=["organizations"])

UserId = Annotated[str | None, Depends(get_current_user_id)]
Directory = Annotated[OrganizationDirectory, Depends(get_organization_directory)]


def with_role(organization: Organization, role: Role) -> OrganizationWithRole:
    data = OrganizationResponse.model_validate(organization).model_dump()
    return OrganizationWithRole(**data, role=role)


# Organization CRUD endpoints
@router.get("", response_model=list[OrganizationWithRole])
async def list_organizations(user_id: UserId, directory: Directory):
    """List the organizations the current user belongs to, with their role."""
    memberships = await directory.list_for_user(user_id)
    return [with_role(org, role) for org, role in memberships]


@router.post("", response_model=OrganizationWithRole, status_code=status.HTTP_201_CREATED)
async def create_organization(
    org_data: OrganizationCreate,
    user_id: UserId,
    directory: Directory,
):
    """Create a new organization owned by the current user."""
    organization, role = await directory.create(user_id, org_data)
    return with_role(organization, role)


@router.get("/{organization_id}", response_model=OrganizationWithRole)
async def get_organization(organization_id: str, user_id: UserId, directory: Directory):
    """Get an organization the current user belongs to."""
    organization, role = await directory.get(user_id, organization_id)
    return with_role(organization, role)


@router.patch("/{organization_id}", response_model=OrganizationWithRole)
async def update_organization(
    organization_id: str,
    update_data: OrganizationUpdate,
    user_id: UserId,
    directory: Directory,
):
    """Update organization settings (manage_settings; plan and limits need manage_billing)."""
    organization, role = await directory.update(user_id, organization_id, update_data)
    return with_role(organization, role)


@router.delete("/{organization_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_organization(organization_id: str, user_id: UserId, directory: Directory):
    """Delete an organization and everything it owns (owner only)."""
    await directory.delete(user_id, organization_id)


# Invitation endpoints
@router.post(
    "/{organization_id}/invitations",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invitation(
    organization_id: str,
    invitation_data: InvitationCreate,
    user_id: UserId,
    directory: Directory,
):
    """Invite an email address to the organization (manage_members)."""
    return await directory.create_invitation(user_id, organization_id, invitation_data)


@router.get("/{organization_id}/invitations", response_model=list[InvitationResponse])
async def list_invitations(organization_id: str, user_id: UserId, directory: Directory):
    """List pending invitations (manage_members)."""
    return await directory.list_invitations(user_id, organization_id)


@router.delete("/{organization_id}/invitations/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_invitation(
    organization_id: str,
    invitation_id: str,
    user_id: UserId,
    directory: Directory,
):
    """Revoke a pending invitation (manage_members)."""
    await directory.revoke_invitation(user_id, organization_id, invitation_id)
