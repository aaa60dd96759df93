"""RTO service layer."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from .directory import select_active_by_subdomain
from .models import Rto

logger = logging.getLogger(__name__)


class RtoService:
    """Service for read-only RTO operations exposed over the API."""

    @staticmethod
    async def get_active_by_subdomain(session: AsyncSession, subdomain: str) -> Rto | None:
        """Get the active RTO for a subdomain (no auto-provisioning)."""
        result = await session.execute(select_active_by_subdomain(subdomain))
        return result.scalars().first()
