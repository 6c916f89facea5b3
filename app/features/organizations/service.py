"""
Organization directory: tenant records, their settings and invitations.
"""
import secrets
from datetime import timedelta
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.core.database.base import generate_ulid, utcnow
from app.core.database.transactions import commit_or_raise, unit_of_work
from app.core.errors import NotFound, ValidationError
from app.core.slugs import make_slug
from app.features.documents.models import Document
from app.features.organizations.models import Invitation, Organization
from app.features.organizations.schemas import InvitationCreate, OrganizationCreate, OrganizationUpdate
from app.features.permissions.dependencies import AuthorizationGuard
from app.features.permissions.models import Permission, Role
from app.utils import get_logger


log = get_logger(__name__)

BILLING_FIELDS = frozenset({"plan", "max_documents", "max_members"})
REQUIRED_FIELDS = frozenset({"name", "plan", "max_documents", "max_members"})


class OrganizationDirectory:

    def __init__(self, db: AsyncSession, guard: AuthorizationGuard):
        self.db = db
        self.guard = guard
        self.memberships = guard.memberships

    async def _load(self, organization_id: str) -> Organization:
        organization = await self.db.get(Organization, organization_id)
        if organization is None:
            raise NotFound("Organization not found")
        return organization

    async def list_for_user(self, user_id: str | None) -> list[tuple[Organization, Role]]:
        """Organizations the user belongs to, with the user's role in each."""
        user_id = self.guard.require_user(user_id)
        return await self.memberships.memberships_of(user_id)

    async def create(self, user_id: str | None, data: OrganizationCreate) -> tuple[Organization, Role]:
        """
        Create an organization owned by the caller.

        The organization row and the owner membership are committed together;
        a slug collision rolls both back.

        Raises:
            Unauthenticated: no user
            ValidationError: blank name or unusable slug
            ConflictError: slug already taken
        """
        user_id = self.guard.require_user(user_id)
        name = data.name.strip()
        if not name:
            raise ValidationError("Organization name is required")
        slug = make_slug(data.slug if data.slug is not None else name)

        branding = data.model_dump(exclude_unset=True, exclude={"name", "slug"})
        organization = Organization(id=generate_ulid(), name=name, slug=slug, **branding)

        async with unit_of_work(self.db, f"Organization slug '{slug}' is already in use"):
            self.db.add(organization)
            await self.db.flush()
            self.memberships.add(user_id, organization.id, Role.OWNER)

        await self.db.refresh(organization)
        log.info(f"Organization {organization.id} ({slug}) created by {user_id}")
        return organization, Role.OWNER

    async def get(self, user_id: str | None, organization_id: str) -> tuple[Organization, Role]:
        """
        Raises:
            NoMembership: caller is not a member, or no such organization
        """
        user_id = self.guard.require_user(user_id)
        role = await self.guard.authorize(user_id, organization_id, Permission.VIEW_DOCS)
        organization = await self._load(organization_id)
        return organization, role

    async def update(
        self,
        user_id: str | None,
        organization_id: str,
        data: OrganizationUpdate,
    ) -> tuple[Organization, Role]:
        """
        Apply the fields present in ``data``; absent fields are left alone.

        Settings need manage_settings, plan and limits also need manage_billing.
        """
        user_id = self.guard.require_user(user_id)
        role = await self.guard.authorize(user_id, organization_id, Permission.MANAGE_SETTINGS)
        organization = await self._load(organization_id)

        changes = data.model_dump(exclude_unset=True)
        if BILLING_FIELDS & changes.keys():
            await self.guard.authorize(user_id, organization_id, Permission.MANAGE_BILLING)

        for field in REQUIRED_FIELDS & changes.keys():
            if changes[field] is None:
                raise ValidationError(f"'{field}' cannot be null")
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise ValidationError("Organization name is required")

        for field, value in changes.items():
            setattr(organization, field, value)
        organization.updated_at = utcnow()

        await commit_or_raise(self.db, "Organization could not be updated")
        await self.db.refresh(organization)
        log.info(f"Organization {organization_id} updated by {user_id}: {sorted(changes)}")
        return organization, role

    async def delete(self, user_id: str | None, organization_id: str) -> None:
        """
        Delete the organization with its memberships, documents and invitations
        in one transaction.
        """
        user_id = self.guard.require_user(user_id)
        await self.guard.authorize(user_id, organization_id, Permission.DELETE_ORG)
        organization = await self._load(organization_id)

        async with unit_of_work(self.db, "Organization could not be deleted"):
            await self.db.execute(delete(Invitation).where(Invitation.organization_id == organization_id))
            await self.db.execute(delete(Document).where(Document.organization_id == organization_id))
            await self.memberships.delete(organization_id)
            await self.db.delete(organization)

        log.info(f"Organization {organization_id} deleted by {user_id}")

    # Invitations

    async def create_invitation(
        self,
        user_id: str | None,
        organization_id: str,
        data: InvitationCreate,
    ) -> Invitation:
        user_id = self.guard.require_user(user_id)
        await self.guard.authorize(user_id, organization_id, Permission.MANAGE_MEMBERS)
        await self._load(organization_id)
        if data.role == Role.OWNER:
            raise ValidationError("The owner role cannot be offered by invitation")

        invitation = Invitation(
            organization_id=organization_id,
            email=str(data.email).lower(),
            role=data.role,
            token=secrets.token_urlsafe(32),
            expires_at=utcnow() + timedelta(days=config.INVITATION_TTL_DAYS),
            created_by=user_id,
        )
        self.db.add(invitation)
        await commit_or_raise(self.db, "Invitation token collision, try again")
        log.info(f"Invitation {invitation.id} for {invitation.email} created in org {organization_id}")
        return invitation

    async def list_invitations(self, user_id: str | None, organization_id: str) -> list[Invitation]:
        """Invitations that have not expired yet, newest first."""
        user_id = self.guard.require_user(user_id)
        await self.guard.authorize(user_id, organization_id, Permission.MANAGE_MEMBERS)
        await self._load(organization_id)

        result = await self.db.execute(
            select(Invitation)
            .where(
                Invitation.organization_id == organization_id,
                Invitation.expires_at > utcnow(),
            )
            .order_by(Invitation.created_at.desc(), Invitation.id.desc())
        )
        return list(result.scalars().all())

    async def revoke_invitation(self, user_id: str | None, organization_id: str, invitation_id: str) -> None:
        user_id = self.guard.require_user(user_id)
        await self.guard.authorize(user_id, organization_id, Permission.MANAGE_MEMBERS)
        await self._load(organization_id)

        invitation = await self.db.get(Invitation, invitation_id)
        if invitation is None or invitation.organization_id != organization_id:
            raise NotFound("Invitation not found")

        await self.db.delete(invitation)
        await commit_or_raise(self.db, "Invitation could not be revoked")
        log.info(f"Invitation {invitation_id} revoked in org {organization_id}")
