"""Multi-tenancy middleware for resolving and setting tenant context.

This middleware resolves the RTO for each request (host subdomain, explicit
override, rtoId query parameter) and stores the resulting TenantContext in
request.state before any route handler runs. It does NOT enforce the presence
of a tenant: routers that need one use the require_tenant dependency.
"""

import logging
from collections.abc import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .context import RequestHints, TenantContext
from .resolver import TenantResolver

logger = logging.getLogger(__name__)


class TenantMiddleware(BaseHTTPMiddleware):
    """Middleware to resolve the tenant of every request exactly once.

    The resolver is read from app.state.tenant_resolver, installed by the
    application lifespan once the database is up. Until then (or when the path
    is excluded) requests run in the global context.

    Any authentication middleware that wants RTOs it provisions attributed to
    a user must run before this one and set request.state.user_id.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Resolve tenant context and set it in request state.

        Args:
            request: The incoming request
            call_next: The next middleware or route handler

        Returns:
            The response from the next middleware or handler

        """
        resolver: TenantResolver | None = getattr(request.app.state, "tenant_resolver", None)

        if resolver is None:
            logger.warning("Tenant resolver not configured, request runs in global context")
            context = TenantContext.empty()
        elif resolver.config.is_excluded(request.url.path):
            context = TenantContext.empty()
        else:
            context = await resolver.resolve(RequestHints.from_request(request, resolver.config))

        request.state.tenant_context = context

        response: Response = await call_next(request)
        return response
