"""Tenant directory: persistence and lookup of RTO records."""

import logging
from typing import Protocol
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .exceptions import DirectoryUnavailable, DuplicateKey
from .models import Rto

logger = logging.getLogger(__name__)


def normalize_subdomain(subdomain: str) -> str:
    """Canonical form used for every subdomain lookup and insert."""
    return subdomain.strip().lower()


def select_active_by_subdomain(subdomain: str) -> Select[tuple[Rto]]:
    """Query for the active RTO of a subdomain, shared by every lookup path."""
    return select(Rto).where(Rto.subdomain == normalize_subdomain(subdomain), Rto.is_active.is_(True))


class TenantDirectory(Protocol):
    """Read/create access to RTO records used by the tenant resolver."""

    async def find_active_by_subdomain(self, subdomain: str) -> Rto | None:
        """Return the active RTO for a subdomain, or None."""
        ...

    async def find_inactive_by_subdomain(self, subdomain: str) -> Rto | None:
        """Return a deactivated RTO for a subdomain, or None."""
        ...

    async def find_by_id(self, rto_id: UUID) -> Rto | None:
        """Return the RTO with this id (active or not), or None."""
        ...

    async def create(self, candidate: Rto) -> Rto:
        """Insert a new RTO, raising DuplicateKey on a unique collision."""
        ...


class RtoDirectory:
    """SQLAlchemy-backed tenant directory.

    Every operation runs in its own short session so that a failed insert
    never poisons the caller's unit of work. Uniqueness of active subdomains is
    enforced by the database (partial unique index), which is what makes
    concurrent auto-provisioning safe.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_active_by_subdomain(self, subdomain: str) -> Rto | None:
        return await self._first(select_active_by_subdomain(subdomain))

    async def find_inactive_by_subdomain(self, subdomain: str) -> Rto | None:
        stmt = (
            select(Rto)
            .where(Rto.subdomain == normalize_subdomain(subdomain), Rto.is_active.is_(False))
            .order_by(Rto.created_at.desc())
            .limit(1)
        )
        return await self._first(stmt)

    async def find_by_id(self, rto_id: UUID) -> Rto | None:
        try:
            async with self._session_factory() as session:
                return await session.get(Rto, rto_id)
        except SQLAlchemyError as exc:
            raise DirectoryUnavailable(f"RTO lookup by id failed: {exc}") from exc

    async def create(self, candidate: Rto) -> Rto:
        """Insert and commit a new RTO.

        Raises:
            DuplicateKey: A unique constraint rejected the row (e.g. another
                request provisioned the same subdomain first).
            DirectoryUnavailable: Any other database failure.

        """
        candidate.subdomain = normalize_subdomain(candidate.subdomain)
        try:
            async with self._session_factory() as session:
                session.add(candidate)
                try:
                    await session.commit()
                except IntegrityError as exc:
                    await session.rollback()
                    raise DuplicateKey(
                        f"RTO with conflicting unique fields already exists: {exc.orig}",
                        subdomain=candidate.subdomain,
                    ) from exc
        except SQLAlchemyError as exc:
            raise DirectoryUnavailable(f"RTO insert failed: {exc}") from exc

        logger.info(f"RTO created: {candidate.company_name} ({candidate.subdomain}) id={candidate.id}")
        return candidate

    async def _first(self, stmt) -> Rto | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.scalars().first()
        except SQLAlchemyError as exc:
            raise DirectoryUnavailable(f"RTO lookup failed: {exc}") from exc
