"""
Pydantic schemas for document requests and responses.
"""
from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field


class DocumentCreate(BaseModel):
    """Schema for creating a document."""
    title: str = Field(..., max_length=255)
    slug: str | None = Field(None, max_length=255, description="Defaults to a slug of the title")
    content: Any | None = Field(None, description="Editor JSON, stored as is")
    parent_id: str | None = Field(None, description="Parent document in the same organization")


class DocumentUpdate(BaseModel):
    """
    Schema for updating a document.

    Only fields present in the body are applied. ``parent_id: null`` moves the
    document to the root; ``content: null`` clears it.
    """
    title: str | None = Field(None, max_length=255)
    slug: str | None = Field(None, max_length=255)
    content: Any | None = None
    published: bool | None = None
    order: int | None = None
    parent_id: str | None = None


class DocumentResponse(BaseModel):
    id: str
    organization_id: str
    title: str
    slug: str
    content: Any | None = None
    parent_id: str | None = None
    order: int
    published: bool
    created_by: str
    last_edited_by: str | None = None
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}


class DocumentTree(DocumentResponse):
    """Document with its materialized children."""
    children: list["DocumentTree"] = Field(default_factory=list)


DocumentTree.model_rebuild()
