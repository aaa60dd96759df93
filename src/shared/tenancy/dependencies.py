"""Tenant-related dependencies for route handlers."""

from uuid import UUID

from fastapi import Request

from src.features.rto.exceptions import TenantContextRequired

from .context import TenantContext


async def get_tenant_context(request: Request) -> TenantContext:
    """Dependency returning the TenantContext resolved by TenantMiddleware.

    Falls back to the empty (global) context when the middleware did not run,
    e.g. for an app mounted without it.
    """
    context: TenantContext | None = getattr(request.state, "tenant_context", None)
    return context if context is not None else TenantContext.empty()


async def get_scope_rto_id(request: Request) -> UUID | None:
    """Dependency returning the RTO id to scope queries by, None in the global context."""
    context = await get_tenant_context(request)
    return context.rto_id


async def require_tenant(request: Request) -> UUID:
    """Dependency that requires a resolved RTO.

    This dependency should be applied at the router level using
    include_router(..., dependencies=[Depends(require_tenant)])
    for routes that only make sense inside an RTO.

    Args:
        request: The incoming FastAPI request

    Returns:
        The RTO id as a UUID

    Raises:
        TenantContextRequired: 400 Bad Request if no RTO was resolved

    Example:
        app.include_router(
            application_router,
            prefix="/api",
            dependencies=[Depends(require_tenant)]
        )

    """
    context = await get_tenant_context(request)

    if not context.is_tenant_context or context.rto_id is None:
        raise TenantContextRequired()

    return context.rto_id
