"""Application settings and configuration."""

import logging
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_SKIP_SUBDOMAINS = (
    "api",
    "www",
    "certified",
    "localhost",
    "staging",
    "backendstaging",
    "admin",
    "dashboard",
    "app",
    "portal",
    "system",
    "global",
    "main",
    "core",
    "base",
    "default",
    "root",
    "master",
    "primary",
    "central",
)

VALID_RESOLUTION_STAGES = ("subdomain", "query_id")


def _split_csv(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item).strip() for item in value if str(item).strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application (hardcoded constants)
    app_name: str = "Certified API"
    app_version: str = "0.1.0"

    # Environment-specific settings
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Database
    database_url: str = "sqlite+aiosqlite:///./certified.db"
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_pool_timeout: int = 30
    database_pool_recycle: int = 3600
    database_echo: bool = False

    # API
    api_prefix: str = "/api"

    # CORS
    cors_allow_origins: Annotated[list[str], NoDecode] = []

    # Multi-tenancy (RTO resolution)
    tenant_skip_subdomains: Annotated[frozenset[str], NoDecode] = frozenset(DEFAULT_SKIP_SUBDOMAINS)
    tenant_forwarded_host_header: str = "x-forwarded-host"
    tenant_subdomain_header: str = "x-rto-subdomain"
    tenant_subdomain_query_param: str = "rto"
    tenant_id_query_param: str = "rtoId"
    tenant_resolution_stages: Annotated[tuple[str, ...], NoDecode] = VALID_RESOLUTION_STAGES
    tenant_excluded_paths: Annotated[frozenset[str], NoDecode] = frozenset(
        {"/health", "/docs", "/redoc", "/openapi.json"}
    )
    tenant_base_domain: str = "certified.io"

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"development", "staging", "production"}
        env = str(v).lower()
        if env not in valid_envs:
            raise ValueError(f"Environment must be one of {valid_envs}, got {env}")
        return env

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v) -> list[str]:
        """Parse comma-separated CORS origins."""
        return _split_csv(v)

    @field_validator("tenant_skip_subdomains", mode="before")
    @classmethod
    def parse_skip_subdomains(cls, v) -> frozenset[str]:
        """Parse the reserved subdomain labels, lower-cased."""
        return frozenset(label.lower() for label in _split_csv(v))

    @field_validator("tenant_excluded_paths", mode="before")
    @classmethod
    def parse_excluded_paths(cls, v) -> frozenset[str]:
        """Parse paths that never go through tenant resolution."""
        return frozenset(_split_csv(v))

    @field_validator("tenant_resolution_stages", mode="before")
    @classmethod
    def validate_resolution_stages(cls, v) -> tuple[str, ...]:
        """Validate the ordered list of tenant resolution stages."""
        stages = tuple(stage.lower() for stage in _split_csv(v))
        unknown = [stage for stage in stages if stage not in VALID_RESOLUTION_STAGES]
        if unknown:
            raise ValueError(f"Unknown tenant resolution stages {unknown}, expected any of {VALID_RESOLUTION_STAGES}")
        if len(set(stages)) != len(stages):
            raise ValueError("Tenant resolution stages must not repeat")
        return stages


settings = Settings()
