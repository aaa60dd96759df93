"""RTO router (API endpoints)."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.database.dependencies import get_db_session
from src.shared.tenancy.context import TenantContext
from src.shared.tenancy.dependencies import get_tenant_context

from .exceptions import RtoNotFound
from .schemas import RtoPublicResponse, TenantContextResponse
from .service import RtoService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/rto", tags=["RTO"])


@router.get("/current", response_model=TenantContextResponse)
async def get_current_rto(context: TenantContext = Depends(get_tenant_context)):
    """Get the RTO resolved for this request (global context when none)."""
    rto = context.rto
    return TenantContextResponse(
        rto_id=context.rto_id,
        is_tenant_context=context.is_tenant_context,
        source=context.source.value,
        full_domain=rto.full_domain(settings.tenant_base_domain) if rto is not None else None,
        rto=RtoPublicResponse.model_validate(rto) if rto is not None else None,
    )


@router.get("/subdomain/{subdomain}", response_model=RtoPublicResponse)
async def get_rto_by_subdomain(subdomain: str, session: AsyncSession = Depends(get_db_session)):
    """Get public information of an active RTO by subdomain."""
    rto = await RtoService.get_active_by_subdomain(session, subdomain)
    if rto is None:
        raise RtoNotFound()
    return RtoPublicResponse.model_validate(rto)
