"""
Authorization guard and its FastAPI wiring.

The guard re-reads membership state on every call; nothing is cached
between requests, so a revoked role stops working on the next request.
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import InsufficientPermission, NoMembership, Unauthenticated
from app.features.memberships.service import MembershipStore
from app.features.permissions.models import Permission, Role, has_permission
from app.utils import get_logger


log = get_logger(__name__)


class AuthorizationGuard:
    """Decides whether a user may perform an action inside an organization."""

    def __init__(self, memberships: MembershipStore):
        self.memberships = memberships

    @staticmethod
    def require_user(user_id: str | None) -> str:
        if not user_id:
            raise Unauthenticated()
        return user_id

    async def authorize(
        self,
        user_id: str | None,
        organization_id: str,
        permission: Permission,
    ) -> Role:
        """
        Return the caller's role if it grants ``permission`` in the organization.

        Raises:
            Unauthenticated: no verified user
            NoMembership: user has no role in the organization
            InsufficientPermission: user's role lacks the permission
        """
        self.require_user(user_id)

        role = await self.memberships.role_of(user_id, organization_id)
        if role is None:
            log.debug(f"User {user_id} denied {permission.value} in org {organization_id}: no membership")
            raise NoMembership()

        if not has_permission(role, permission):
            log.debug(f"User {user_id} denied {permission.value} in org {organization_id} as {role.value}")
            raise InsufficientPermission(
                f"Role '{role.value}' does not grant '{permission.value}'"
            )

        log.debug(f"User {user_id} granted {permission.value} in org {organization_id} as {role.value}")
        return role


def get_membership_store(db: Annotated[AsyncSession, Depends(get_db)]) -> MembershipStore:
    return MembershipStore(db)


def get_authorization_guard(
    memberships: Annotated[MembershipStore, Depends(get_membership_store)]
) -> AuthorizationGuard:
    return AuthorizationGuard(memberships)
