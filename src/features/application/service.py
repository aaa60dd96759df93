"""Application service layer.

Reads use the legacy-inclusive scope so applications created before
multi-tenancy stay visible to the RTO that inherited them. Per-RTO statistics
use the strict scope: they count only rows actually tagged with the RTO.
"""

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.pagination.pagination import PaginationParams
from src.shared.pagination.sqlalchemy_pagination import SQLAlchemyPagination
from src.shared.tenancy.context import TenantContext

from .models import Application, ApplicationStatus
from .schemas import ApplicationCreateRequest

logger = logging.getLogger(__name__)


class ApplicationService:
    """Service for tenant-scoped application operations."""

    @staticmethod
    async def create_application(
        session: AsyncSession,
        rto_id: UUID,
        data: ApplicationCreateRequest,
    ) -> Application:
        """Create an application tagged with the given RTO.

        New applications always belong to an RTO; only rows written before
        multi-tenancy are untagged.
        """
        application = Application(
            rto_id=rto_id,
            user_id=data.user_id,
            certification_name=data.certification_name,
            status=ApplicationStatus.INITIATED.value,
        )
        session.add(application)
        await session.flush()
        logger.info(f"Application {application.id} created for RTO {rto_id}")
        return application

    @staticmethod
    async def get_application(
        session: AsyncSession,
        context: TenantContext,
        application_id: int,
    ) -> Application | None:
        """Get an application by id if it is visible from the request's RTO."""
        stmt = select(Application).where(
            Application.id == application_id,
            context.legacy_inclusive_scope().clause(Application.rto_id),
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_applications(
        session: AsyncSession,
        context: TenantContext,
        pagination: PaginationParams,
        status: ApplicationStatus | None = None,
    ) -> tuple[list[Application], int]:
        """Get a page of applications visible from the request's RTO.

        Args:
            session: Database session
            context: Tenant context of the request
            pagination: PaginationParams with page and page_size
            status: Optional status filter

        Returns:
            Tuple of (applications, total_count)

        """
        filters = [Application.status == status.value] if status is not None else []
        return await SQLAlchemyPagination.paginate(
            session,
            Application,
            pagination,
            scope=context.legacy_inclusive_scope(),
            filters=filters,
            order_by=[Application.id],
        )

    @staticmethod
    async def get_stats(session: AsyncSession, context: TenantContext) -> dict[str, int]:
        """Count the RTO's own applications by status (legacy rows excluded)."""
        scope = context.strict_scope()
        stmt = scope.apply(
            select(Application.status, func.count()).group_by(Application.status),
            Application,
        )
        result = await session.execute(stmt)
        return {str(ApplicationStatus(status_value).value): count for status_value, count in result.all()}

    @staticmethod
    async def count_legacy_applications(session: AsyncSession) -> int:
        """Count applications that carry no RTO."""
        result = await session.execute(
            select(func.count()).select_from(Application).where(Application.rto_id.is_(None))
        )
        return result.scalar_one()

    @staticmethod
    async def claim_legacy_applications(session: AsyncSession, rto_id: UUID) -> int:
        """Tag every legacy (untagged) application with the given RTO.

        Run by operators through src/scripts/claim_legacy_applications.py,
        never from a request handler.

        Returns:
            Number of applications claimed

        """
        stmt = update(Application).where(Application.rto_id.is_(None)).values(rto_id=rto_id)
        result = await session.execute(stmt)
        claimed = result.rowcount or 0
        logger.info(f"RTO {rto_id} claimed {claimed} legacy applications")
        return claimed
