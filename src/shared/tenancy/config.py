"""Immutable tenancy configuration handed to the resolver and middleware."""

from dataclasses import dataclass, field

from src.config.settings import DEFAULT_SKIP_SUBDOMAINS, VALID_RESOLUTION_STAGES, Settings


@dataclass(frozen=True)
class TenancyConfig:
    """Everything the tenant resolver needs to know about the deployment.

    Built once at start-up from Settings and injected; nothing in the tenancy
    package reads the global settings object directly.

    Attributes:
        skip_subdomains: Reserved labels that never name an RTO.
        forwarded_host_header: Header preferred over Host when present.
        subdomain_header: Header carrying an explicit RTO subdomain override.
        subdomain_query_param: Query parameter carrying the same override.
        id_query_param: Query parameter carrying an RTO id (alternate path).
        resolution_stages: Stages run by the middleware, in order.
        excluded_paths: Request paths that skip resolution entirely.
        base_domain: Platform domain, used to render an RTO's full domain.

    """

    skip_subdomains: frozenset[str] = frozenset(DEFAULT_SKIP_SUBDOMAINS)
    forwarded_host_header: str = "x-forwarded-host"
    subdomain_header: str = "x-rto-subdomain"
    subdomain_query_param: str = "rto"
    id_query_param: str = "rtoId"
    resolution_stages: tuple[str, ...] = VALID_RESOLUTION_STAGES
    excluded_paths: frozenset[str] = field(default_factory=frozenset)
    base_domain: str = "certified.io"

    @classmethod
    def from_settings(cls, settings: Settings) -> "TenancyConfig":
        return cls(
            skip_subdomains=frozenset(label.lower() for label in settings.tenant_skip_subdomains),
            forwarded_host_header=settings.tenant_forwarded_host_header,
            subdomain_header=settings.tenant_subdomain_header,
            subdomain_query_param=settings.tenant_subdomain_query_param,
            id_query_param=settings.tenant_id_query_param,
            resolution_stages=tuple(settings.tenant_resolution_stages),
            excluded_paths=frozenset(settings.tenant_excluded_paths),
            base_domain=settings.tenant_base_domain,
        )

    def is_skipped(self, subdomain: str) -> bool:
        """Check if a subdomain label is reserved (never an RTO)."""
        return subdomain.lower() in self.skip_subdomains

    def is_excluded(self, path: str) -> bool:
        """Check if a request path skips tenant resolution.

        An excluded path also covers its trailing-slash form and everything
        below it: "/docs" excludes "/docs/" and "/docs/oauth2-redirect".
        """
        for excluded in self.excluded_paths:
            prefix = excluded.rstrip("/")
            if not prefix:
                if path == "/":
                    return True
                continue
            if path == prefix or path.startswith(prefix + "/"):
                return True
        return False
