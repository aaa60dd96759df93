"""Per-request tenant context and the request hints it is resolved from."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import UUID

from .filters import TenantScope, legacy_inclusive_filter, strict_filter

if TYPE_CHECKING:
    from fastapi import Request

    from src.features.rto.models import Rto

    from .config import TenancyConfig


class ResolutionSource(StrEnum):
    """How the tenant context of a request was obtained."""

    NONE = "none"
    SUBDOMAIN = "subdomain"
    PROVISIONED = "provisioned"
    PROVISIONED_OVER_INACTIVE = "provisioned_over_inactive"
    RACE_RECOVERED = "race_recovered"
    OVERRIDE = "override"
    QUERY_ID = "query_id"


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant context for the current request.

    Populated once by TenantMiddleware and read-only afterwards. Downstream
    code reads it through the get_tenant_context dependency and never parses
    the host again.

    Attributes:
        rto_id: Id of the resolved RTO, None in the global context.
        rto: The resolved RTO record, None in the global context.
        is_tenant_context: True when an RTO was resolved.
        source: Which resolution path produced this context.

    """

    rto_id: UUID | None = None
    rto: Rto | None = None
    is_tenant_context: bool = False
    source: ResolutionSource = ResolutionSource.NONE

    @classmethod
    def empty(cls) -> TenantContext:
        """Global context: no RTO, queries are unscoped."""
        return cls()

    @classmethod
    def for_rto(cls, rto: Rto, source: ResolutionSource) -> TenantContext:
        return cls(rto_id=rto.id, rto=rto, is_tenant_context=True, source=source)

    def strict_scope(self) -> TenantScope:
        return strict_filter(self.rto_id)

    def legacy_inclusive_scope(self) -> TenantScope:
        return legacy_inclusive_filter(self.rto_id)


@dataclass(frozen=True)
class RequestHints:
    """The addressing information tenant resolution consumes from a request."""

    host: str | None = None
    forwarded_host: str | None = None
    subdomain_override: str | None = None
    rto_id_param: str | None = None
    user_id: str | None = None

    @classmethod
    def from_request(cls, request: Request, config: TenancyConfig) -> RequestHints:
        """Collect hints from headers, query string and upstream auth state.

        The subdomain override may come from a header or a query parameter;
        the header wins when both are present. The authenticated user id is
        whatever an upstream auth layer left on request.state.user_id.
        """
        override = request.headers.get(config.subdomain_header) or request.query_params.get(
            config.subdomain_query_param
        )
        user_id = getattr(request.state, "user_id", None)
        return cls(
            host=request.headers.get("host"),
            forwarded_host=request.headers.get(config.forwarded_host_header),
            subdomain_override=override.strip() if override and override.strip() else None,
            rto_id_param=request.query_params.get(config.id_query_param) or None,
            user_id=str(user_id) if user_id is not None else None,
        )
