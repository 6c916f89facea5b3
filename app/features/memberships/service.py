"""
Membership store: answers "what role does user U hold in organization O?".
"""
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.transactions import commit_or_raise
from app.features.memberships.models import Membership
from app.features.organizations.models import Organization
from app.features.permissions.models import Role
from app.utils import get_logger


log = get_logger(__name__)


class MembershipStore:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def role_of(self, user_id: str, organization_id: str) -> Role | None:
        """Role of the user in the organization, or None when they have no standing there."""
        result = await self.db.execute(
            select(Membership.role).where(
                Membership.user_id == user_id,
                Membership.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def memberships_of(self, user_id: str) -> list[tuple[Organization, Role]]:
        """Organizations the user belongs to, oldest membership first."""
        result = await self.db.execute(
            select(Organization, Membership.role)
            .join(Membership, Membership.organization_id == Organization.id)
            .where(Membership.user_id == user_id)
            .order_by(Membership.created_at, Membership.id)
        )
        return [(org, role) for org, role in result.all()]

    async def members_of(self, organization_id: str) -> list[Membership]:
        result = await self.db.execute(
            select(Membership)
            .where(Membership.organization_id == organization_id)
            .order_by(Membership.created_at, Membership.id)
        )
        return list(result.scalars().all())

    def add(self, user_id: str, organization_id: str, role: Role) -> Membership:
        """Stage a membership in the current unit of work without committing."""
        membership = Membership(user_id=user_id, organization_id=organization_id, role=role)
        self.db.add(membership)
        return membership

    async def create(self, user_id: str, organization_id: str, role: Role) -> Membership:
        """
        Create a membership.

        Raises:
            ConflictError: the user already belongs to the organization
        """
        membership = self.add(user_id, organization_id, role)
        await commit_or_raise(self.db, "User is already a member of this organization")
        log.info(f"User {user_id} joined org {organization_id} as {role.value}")
        return membership

    async def get(self, user_id: str, organization_id: str) -> Membership | None:
        result = await self.db.execute(
            select(Membership).where(
                Membership.user_id == user_id,
                Membership.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def remove(self, membership: Membership) -> None:
        await self.db.delete(membership)
        await commit_or_raise(self.db, "Membership could not be removed")
        log.info(f"User {membership.user_id} removed from org {membership.organization_id}")

    async def delete(self, organization_id: str) -> None:
        """Stage removal of every membership of the organization."""
        await self.db.execute(
            delete(Membership).where(Membership.organization_id == organization_id)
        )
