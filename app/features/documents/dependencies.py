"""
Document-related dependency injection functions.
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.documents.service import DocumentStore
from app.features.permissions.dependencies import AuthorizationGuard, get_authorization_guard


def get_document_store(
    db: Annotated[AsyncSession, Depends(get_db)],
    guard: Annotated[AuthorizationGuard, Depends(get_authorization_guard)],
) -> DocumentStore:
    return DocumentStore(db, guard)
