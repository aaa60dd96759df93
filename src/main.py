import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from src.config.settings import settings
from src.database import client as db_client
from src.features.application.router import router as application_router
from src.features.rto.directory import RtoDirectory
from src.features.rto.router import router as rto_router
from src.shared.tenancy.config import TenancyConfig
from src.shared.tenancy.resolver import TenantResolver
from src.shared.tenancy.tenant_middleware import TenantMiddleware

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address)


async def rate_limit_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded"},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    # Startup
    await db_client.init_db()
    tenancy_config = TenancyConfig.from_settings(settings)
    app.state.tenant_resolver = TenantResolver(RtoDirectory(db_client.get_session_factory()), tenancy_config)
    logger.info(
        f"Tenant resolution stages: {list(tenancy_config.resolution_stages)}, "
        f"{len(tenancy_config.skip_subdomains)} reserved subdomains"
    )
    yield
    # Shutdown
    app.state.tenant_resolver = None
    await db_client.close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

# Add rate limiting middleware
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_middleware(SlowAPIMiddleware)

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Added last so it runs first: tenant context must exist before any handler
app.add_middleware(TenantMiddleware)

# Router Registration

# Routers usable with or without an RTO (global context sees every record).
# Endpoints that need an RTO depend on require_tenant individually.
routers: list[APIRouter] = [
    rto_router,
    application_router,
]

for router in routers:
    app.include_router(router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    return {"message": "Certified API", "status": "running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
