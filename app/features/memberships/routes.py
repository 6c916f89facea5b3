"""
Membership routes, mounted under /organizations/{organization_id}/members.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, status

from app.core.errors import NotFound, ValidationError
from app.features.memberships.schemas import MemberAdd, MembershipResponse
from app.features.memberships.service import MembershipStore
from app.features.permissions.dependencies import (
    AuthorizationGuard,
    get_authorization_guard,
    get_membership_store,
)
from app.features.permissions.models import Permission, Role
from app.features.users.dependencies import get_current_user_id


router = APIRouter(tags=["members"])

UserId = Annotated[str | None, Depends(get_current_user_id)]
Guard = Annotated[AuthorizationGuard, Depends(get_authorization_guard)]
Memberships = Annotated[MembershipStore, Depends(get_membership_store)]


@router.get("/{organization_id}/members", response_model=list[MembershipResponse])
async def list_members(organization_id: str, user_id: UserId, guard: Guard, memberships: Memberships):
    """List members of an organization (any member)."""
    await guard.authorize(user_id, organization_id, Permission.VIEW_DOCS)
    return await memberships.members_of(organization_id)


@router.post(
    "/{organization_id}/members",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    organization_id: str,
    add_data: MemberAdd,
    user_id: UserId,
    guard: Guard,
    memberships: Memberships,
):
    """Add a user to the organization directly (manage_members)."""
    await guard.authorize(user_id, organization_id, Permission.MANAGE_MEMBERS)
    if add_data.role == Role.OWNER:
        raise ValidationError("The owner role cannot be granted")
    return await memberships.create(add_data.user_id, organization_id, add_data.role)


@router.delete("/{organization_id}/members/{member_user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    organization_id: str,
    member_user_id: str,
    user_id: UserId,
    guard: Guard,
    memberships: Memberships,
):
    """Remove a user from the organization (manage_members). Owners cannot be removed."""
    await guard.authorize(user_id, organization_id, Permission.MANAGE_MEMBERS)

    membership = await memberships.get(member_user_id, organization_id)
    if membership is None:
        raise NotFound("User is not a member of this organization")
    if membership.role == Role.OWNER:
        raise ValidationError("The organization owner cannot be removed")

    await memberships.remove(membership)
