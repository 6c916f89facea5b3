"""
Document model.

Documents form a per-organization tree through ``parent_id``. The tree is
kept as plain id references (no ORM relationship), so loading a node never
pulls in its subtree implicitly.
"""
from typing import Any
from sqlalchemy import String, ForeignKey, Integer, Boolean, JSON, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Document(Base, TimestampMixin):
    __tablename__ = "documents"
    __table_args__ = (
        # Slug is unique per organization, not globally
        UniqueConstraint("organization_id", "slug", name="org_slug_unique"),
        Index("docs_org_parent_idx", "organization_id", "parent_id"),
    )
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    organization_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    content: Mapped[Any | None] = mapped_column(JSON, nullable=True)
    
    parent_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    # Position among siblings; display only, not unique
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    last_edited_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    
    def __repr__(self) -> str:
        return f"<Document(id={self.id}, org_id={self.organization_id}, slug={self.slug!r}, parent_id={self.parent_id})>"
