"""
Membership model: the (user, organization, role) binding.

A user holds at most one membership per organization, enforced by a
unique constraint so concurrent inserts cannot both succeed.
"""
from sqlalchemy import String, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid
from app.features.permissions.models import Role


class Membership(Base, TimestampMixin):
    __tablename__ = "organization_members"
    __table_args__ = (
        UniqueConstraint("user_id", "organization_id", name="user_org_unique"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    organization_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    # Opaque identifier from the identity provider
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    role: Mapped[Role] = mapped_column(
        SQLEnum(
            Role,
            name="member_role",
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=Role.VIEWER,
    )

    def __repr__(self) -> str:
        return f"<Membership(id={self.id}, user_id={self.user_id!r}, org_id={self.organization_id}, role={self.role})>"
