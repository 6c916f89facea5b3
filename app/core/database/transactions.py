"""
Unit-of-work helpers that turn store failures into domain errors.
"""
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, InternalError
from app.utils import get_logger


log = get_logger(__name__)


@asynccontextmanager
async def unit_of_work(db: AsyncSession, conflict_detail: str) -> AsyncIterator[AsyncSession]:
    """
    Run the block and commit it as one transaction.

    Uniqueness is enforced by the database constraints, so a racing writer
    surfaces here as an IntegrityError and becomes a ConflictError. Any other
    store failure is rolled back and reported as an InternalError. Either way
    nothing from the block is left behind.

    Usage:
        async with unit_of_work(db, "Slug already in use"):
            db.add(org)
            await db.flush()
            db.add(membership)
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        log.warning("Constraint violation: %s", conflict_detail)
        raise ConflictError(conflict_detail) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        log.exception("Store failure during commit")
        raise InternalError("Storage failure") from exc


async def commit_or_raise(db: AsyncSession, conflict_detail: str) -> None:
    """Commit whatever is pending in the session, see ``unit_of_work``."""
    async with unit_of_work(db, conflict_detail):
        pass
