"""Application router (API endpoints)."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.dependencies import get_db_session
from src.shared.pagination.pagination import PaginatedResponse, PaginationParams
from src.shared.tenancy.context import TenantContext
from src.shared.tenancy.dependencies import get_tenant_context, require_tenant

from .exceptions import ApplicationNotFound
from .models import ApplicationStatus
from .schemas import (
    ApplicationCreateRequest,
    ApplicationResponse,
    ApplicationStatsResponse,
)
from .service import ApplicationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("", response_model=ApplicationResponse, status_code=201)
async def create_application(
    data: ApplicationCreateRequest,
    rto_id: UUID = Depends(require_tenant),
    session: AsyncSession = Depends(get_db_session),
):
    """Start an application in the current RTO.

    Requires an RTO: an untagged row would be indistinguishable from a legacy
    application and show up in every RTO's listing.
    """
    application = await ApplicationService.create_application(session, rto_id, data)
    await session.commit()
    return ApplicationResponse.model_validate(application)


@router.get("", response_model=PaginatedResponse[ApplicationResponse])
async def list_applications(
    status: ApplicationStatus | None = None,
    pagination: PaginationParams = Depends(),
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_db_session),
):
    """List applications of the current RTO, including legacy applications.

    Without an RTO (reserved subdomain, no override) every application is listed.
    """
    applications, total = await ApplicationService.list_applications(session, context, pagination, status)
    return PaginatedResponse[ApplicationResponse].from_page(
        [ApplicationResponse.model_validate(a) for a in applications],
        total,
        pagination,
    )


@router.get("/stats", response_model=ApplicationStatsResponse)
async def get_application_stats(
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_db_session),
):
    """Count the current RTO's own applications by status."""
    by_status = await ApplicationService.get_stats(session, context)
    return ApplicationStatsResponse(rto_id=context.rto_id, total=sum(by_status.values()), by_status=by_status)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: int,
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_db_session),
):
    """Get an application of the current RTO (or a legacy one) by ID."""
    application = await ApplicationService.get_application(session, context, application_id)

    if not application:
        raise ApplicationNotFound()

    return ApplicationResponse.model_validate(application)
