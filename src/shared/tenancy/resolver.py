"""Tenant resolution: from request hints to a TenantContext."""

import logging
from uuid import UUID

from src.features.rto.directory import TenantDirectory, normalize_subdomain
from src.features.rto.exceptions import DuplicateKey, TenantInactive, TenantResolutionError
from src.features.rto.models import Rto

from .config import TenancyConfig
from .context import RequestHints, ResolutionSource, TenantContext
from .host import effective_host, extract_subdomain
from .provisioning import build_provisioned_rto

logger = logging.getLogger(__name__)


class TenantResolver:
    """Resolve the RTO a request belongs to.

    Resolution is an enrichment, never a precondition: every failure (directory
    down, malformed host, unexpected exception) is logged and yields the empty
    global context instead of failing the request.
    """

    def __init__(self, directory: TenantDirectory, config: TenancyConfig):
        self._directory = directory
        self._config = config

    @property
    def config(self) -> TenancyConfig:
        return self._config

    async def resolve(self, hints: RequestHints) -> TenantContext:
        """Run the configured resolution stages in order.

        Each stage that resolves an RTO replaces the context produced by the
        stages before it, so with the default order ("subdomain", "query_id")
        an rtoId query parameter wins over the host.
        """
        context = TenantContext.empty()
        for stage in self._config.resolution_stages:
            if stage == "subdomain":
                result = await self.resolve_from_host(hints)
            elif stage == "query_id":
                result = await self.resolve_from_query_id(hints)
            else:
                logger.warning(f"Ignoring unknown tenant resolution stage: {stage}")
                continue
            if result is not None and result.is_tenant_context:
                context = result
        return context

    async def resolve_from_host(self, hints: RequestHints) -> TenantContext:
        """Resolve from the request host, auto-provisioning unknown subdomains.

        Reserved (skip-listed) subdomains never provision; they resolve only
        through an explicit subdomain override header or query parameter.
        """
        try:
            return await self._resolve_from_host(hints)
        except TenantResolutionError as exc:
            logger.warning(f"Tenant resolution degraded to global context: {exc}")
        except Exception:
            logger.exception("Unexpected error during tenant resolution, continuing without tenant")
        return TenantContext.empty()

    async def resolve_from_query_id(self, hints: RequestHints) -> TenantContext | None:
        """Resolve from an explicit RTO id query parameter.

        Returns None when the parameter is missing, malformed, unknown or
        points to an inactive RTO.
        """
        if not hints.rto_id_param:
            return None
        try:
            rto_id = UUID(hints.rto_id_param)
        except ValueError:
            logger.debug(f"Ignoring malformed RTO id parameter: {hints.rto_id_param!r}")
            return None

        try:
            rto = await self._directory.find_by_id(rto_id)
        except TenantResolutionError as exc:
            logger.warning(f"RTO lookup by id degraded to global context: {exc}")
            return None
        except Exception:
            logger.exception("Unexpected error resolving RTO by id, continuing without tenant")
            return None

        if rto is None or not rto.is_active:
            logger.debug(f"No active RTO for id {rto_id}")
            return None
        logger.debug(f"RTO resolved from id parameter: {rto.subdomain} ({rto.id})")
        return TenantContext.for_rto(rto, ResolutionSource.QUERY_ID)

    async def _resolve_from_host(self, hints: RequestHints) -> TenantContext:
        subdomain = extract_subdomain(effective_host(hints.host, hints.forwarded_host))

        if self._config.is_skipped(subdomain):
            return await self._resolve_override(subdomain, hints.subdomain_override)

        return await self._find_or_provision(subdomain, hints.user_id)

    async def _resolve_override(self, host_subdomain: str, override: str | None) -> TenantContext:
        if not override:
            logger.debug(f"Reserved subdomain '{host_subdomain}', using global context")
            return TenantContext.empty()

        rto = await self._directory.find_active_by_subdomain(normalize_subdomain(override))
        if rto is None:
            logger.info(f"RTO override '{override}' on reserved subdomain '{host_subdomain}' matched no active RTO")
            return TenantContext.empty()

        logger.debug(f"RTO resolved from override: {rto.subdomain} ({rto.id})")
        return TenantContext.for_rto(rto, ResolutionSource.OVERRIDE)

    async def _find_or_provision(self, subdomain: str, user_id: str | None) -> TenantContext:
        rto = await self._directory.find_active_by_subdomain(subdomain)
        if rto is not None:
            logger.debug(f"RTO resolved from subdomain: {rto.subdomain} ({rto.id})")
            return TenantContext.for_rto(rto, ResolutionSource.SUBDOMAIN)

        source = ResolutionSource.PROVISIONED
        try:
            await self._ensure_not_inactive(subdomain)
        except TenantInactive as exc:
            # An inactive RTO is treated as missing and a new one is provisioned.
            # Product owners have not confirmed this is intended; keep it visible.
            logger.warning(f"{exc}; provisioning a new RTO for the same subdomain")
            source = ResolutionSource.PROVISIONED_OVER_INACTIVE

        candidate = build_provisioned_rto(subdomain, created_by=user_id)
        try:
            rto = await self._directory.create(candidate)
        except DuplicateKey:
            rto = await self._directory.find_active_by_subdomain(subdomain)
            if rto is None:
                # The collision was on another unique field; nothing to recover
                raise
            logger.info(f"Concurrent provisioning of '{subdomain}' detected, using existing RTO {rto.id}")
            return TenantContext.for_rto(rto, ResolutionSource.RACE_RECOVERED)

        logger.info(f"Auto-provisioned RTO '{rto.company_name}' for subdomain '{subdomain}' (id={rto.id})")
        return TenantContext.for_rto(rto, source)

    async def _ensure_not_inactive(self, subdomain: str) -> None:
        inactive: Rto | None = await self._directory.find_inactive_by_subdomain(subdomain)
        if inactive is not None:
            raise TenantInactive(subdomain)
