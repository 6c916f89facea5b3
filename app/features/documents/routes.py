"""
Document feature routes.

``organization_router`` is mounted under /organizations for listing and
creating; ``router`` under /documents for single-document operations.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, status

from app.features.documents.dependencies import get_document_store
from app.features.documents.schemas import (
    DocumentCreate,
    DocumentUpdate,
    DocumentResponse,
    DocumentTree,
)
from app.features.documents.service import DocumentStore
from app.features.users.dependencies import get_current_user_id


router = APIRouter(tags=["documents"])
organization_router = APIRouter(tags=["documents"])

UserId = Annotated[str | None, Depends(get_current_user_id)]
Store = Annotated[DocumentStore, Depends(get_document_store)]


@organization_router.get("/{organization_id}/documents", response_model=list[DocumentTree])
async def list_documents(organization_id: str, user_id: UserId, store: Store):
    """Root documents with two levels of children, ordered by position."""
    return await store.list_tree(user_id, organization_id)


@organization_router.post(
    "/{organization_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_document(
    organization_id: str,
    document_data: DocumentCreate,
    user_id: UserId,
    store: Store,
):
    """Create a document (edit_docs)."""
    return await store.create(user_id, organization_id, document_data)


@router.get("/{document_id}", response_model=DocumentTree)
async def get_document(document_id: str, user_id: UserId, store: Store):
    """Get a document with its immediate children."""
    return await store.get(user_id, document_id)


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    update_data: DocumentUpdate,
    user_id: UserId,
    store: Store,
):
    """Update or move a document (edit_docs)."""
    return await store.update(user_id, document_id, update_data)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: str, user_id: UserId, store: Store):
    """Delete a document and its whole subtree (edit_docs)."""
    await store.delete(user_id, document_id)
