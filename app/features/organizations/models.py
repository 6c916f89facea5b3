"""
Organization models.

Organizations are the tenants of the platform: they own documents,
memberships and pending invitations. Deleting an organization removes all
of them.
"""
from datetime import datetime
from sqlalchemy import String, ForeignKey, Integer, DateTime, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.core.database.base import Base, TimestampMixin, generate_ulid, utcnow
from app.features.permissions.models import Role


class Plan(str, enum.Enum):
    """Billing plan tier."""
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


def _values(enum_cls):
    return [member.value for member in enum_cls]


class Organization(Base, TimestampMixin):
    """
    Organization (tenant).

    The slug is globally unique; it is used as the subdomain or path prefix
    for the organization's public docs.
    """
    __tablename__ = "organizations"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    
    # Plan and limits
    plan: Mapped[Plan] = mapped_column(
        SQLEnum(Plan, name="plan", native_enum=False, length=20, values_callable=_values),
        nullable=False,
        default=Plan.FREE,
    )
    max_documents: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    max_members: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    
    # Branding
    logo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    primary_color: Mapped[str | None] = mapped_column(String(7), nullable=True, default="#000000")
    custom_domain: Mapped[str | None] = mapped_column(String(255), nullable=True)  # docs.acme.com
    
    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name!r}, slug={self.slug!r})>"


class Invitation(Base):
    """
    Pending offer of a role to an email address.

    Acceptance happens outside this service; the token is what the
    invitee presents.
    """
    __tablename__ = "invitations"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    organization_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        SQLEnum(Role, name="invitation_role", native_enum=False, length=20, values_callable=_values),
        nullable=False,
        default=Role.VIEWER,
    )
    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    
    def __repr__(self) -> str:
        return f"<Invitation(id={self.id}, org_id={self.organization_id}, email={self.email!r}, role={self.role})>"
