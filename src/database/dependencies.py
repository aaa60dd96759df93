"""Database dependencies."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from src.database.client import get_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """Get a database session.

    Tenant isolation is not enforced by the session itself. Services receive the
    request's TenantContext and build their filters with the scope builders.
    """
    async with get_session() as session:
        yield session
