"""
Organization-related dependency injection functions.
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.organizations.service import OrganizationDirectory
from app.features.permissions.dependencies import AuthorizationGuard, get_authorization_guard


def get_organization_directory(
    db: Annotated[AsyncSession, Depends(get_db)],
    guard: Annotated[AuthorizationGuard, Depends(get_authorization_guard)],
) -> OrganizationDirectory:
    """
    Organization directory bound to this request's session.

    Usage:
        @router.get("/{organization_id}")
        async def get_organization(
            directory: Annotated[OrganizationDirectory, Depends(get_organization_directory)]
        ):
            ...
    """
    return OrganizationDirectory(db, guard)
