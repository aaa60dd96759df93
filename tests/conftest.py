"""Test configuration and fixtures.

Test setup with a throw-away SQLite database per test:
1. Each test gets a fresh database file with the full schema
2. The tenant directory and the API share one session factory on that file
3. The app's tenant resolver is replaced by one built on the test directory
4. Reserved subdomains are a small explicit list (api, www, admin)
"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import UUID

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

# Load test environment variables
test_env_path = Path(__file__).parent.parent / ".env.test"
load_dotenv(test_env_path, override=True)

# Set test environment
os.environ["TESTING"] = "true"

from src.database.base import Base  # noqa: E402
from src.database.dependencies import get_db_session  # noqa: E402
from src.features.application.models import Application, ApplicationStatus  # noqa: E402
from src.features.rto.directory import RtoDirectory  # noqa: E402
from src.features.rto.models import Rto, default_rto_settings  # noqa: E402
from src.main import app  # noqa: E402
from src.shared.tenancy.config import TenancyConfig  # noqa: E402
from src.shared.tenancy.resolver import TenantResolver  # noqa: E402

TEST_SKIP_SUBDOMAINS = frozenset({"api", "www", "admin"})


# Database Setup - Function Scope (fresh file per test)


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """Create a SQLite database file with the full schema for one test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession]:
    """Session for arranging and asserting database state in tests."""
    async with session_factory() as session:
        yield session


# Tenancy


@pytest.fixture
def tenancy_config() -> TenancyConfig:
    return TenancyConfig(
        skip_subdomains=TEST_SKIP_SUBDOMAINS,
        excluded_paths=frozenset({"/health"}),
    )


@pytest_asyncio.fixture
async def directory(session_factory) -> RtoDirectory:
    return RtoDirectory(session_factory)


@pytest_asyncio.fixture
async def resolver(directory: RtoDirectory, tenancy_config: TenancyConfig) -> TenantResolver:
    return TenantResolver(directory, tenancy_config)


# FastAPI Client & Dependency Overrides


@pytest_asyncio.fixture
async def client(session_factory, resolver: TenantResolver) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client against the app, wired to the test database.

    Requests default to the reserved host api.example.com (global context);
    pass headers={"host": "acme.example.com"} to address an RTO.
    """

    async def _get_test_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _get_test_session
    app.state.tenant_resolver = resolver

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://api.example.com",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.tenant_resolver = None


# Factories


@pytest_asyncio.fixture
async def make_rto(session: AsyncSession):
    """Factory fixture to insert RTO records.

    Usage:
        rto = await make_rto("acme")                       # active
        old = await make_rto("acme", is_active=False)      # deactivated
    """
    counter = 0

    async def _factory(subdomain: str, is_active: bool = True, company_name: str | None = None, **kwargs) -> Rto:
        nonlocal counter
        counter += 1
        now = datetime.now(UTC)
        rto = Rto(
            subdomain=subdomain,
            company_name=company_name or subdomain.title(),
            ceo_name="Test CEO",
            ceo_code=f"TST{counter:03d}",
            email=f"admin@{subdomain}.com",
            phone="+61000000000",
            rto_number=f"RTO{counter:05d}",
            registration_date=now,
            expiry_date=now + timedelta(days=365),
            is_active=is_active,
            is_verified=True,
            settings=default_rto_settings(),
            **kwargs,
        )
        session.add(rto)
        await session.commit()
        return rto

    yield _factory


@pytest_asyncio.fixture
async def make_application(session: AsyncSession):
    """Factory fixture to insert applications (rto_id=None makes a legacy record)."""

    async def _factory(
        rto_id: UUID | None = None,
        certification_name: str = "Certificate III in Carpentry",
        status: ApplicationStatus = ApplicationStatus.INITIATED,
    ) -> Application:
        application = Application(rto_id=rto_id, certification_name=certification_name, status=status.value)
        session.add(application)
        await session.commit()
        return application

    yield _factory
