"""Assign legacy (untagged) applications to one RTO.

Applications created before multi-tenancy carry no rto_id and stay visible to
every RTO. Once the RTO that inherits them is known, an operator runs:

Usage:
    python -m src.scripts.claim_legacy_applications acme --dry-run
    python -m src.scripts.claim_legacy_applications acme
"""

import argparse
import asyncio
import logging
import sys

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.config.settings import settings
from src.database import client as db_client
from src.features.application.service import ApplicationService
from src.features.rto.directory import RtoDirectory
from src.features.rto.exceptions import RtoNotFound

logger = logging.getLogger(__name__)


async def claim_legacy_for_subdomain(
    session_factory: async_sessionmaker[AsyncSession],
    subdomain: str,
    dry_run: bool = False,
) -> int:
    """Tag every legacy application with the active RTO of a subdomain.

    The RTO must already exist; this never provisions one.

    Returns:
        Number of legacy applications claimed (or that would be, on a dry run)

    Raises:
        RtoNotFound: No active RTO has this subdomain

    """
    rto = await RtoDirectory(session_factory).find_active_by_subdomain(subdomain)
    if rto is None:
        raise RtoNotFound()

    async with session_factory() as session:
        if dry_run:
            pending = await ApplicationService.count_legacy_applications(session)
            logger.info(f"Dry run: {pending} legacy applications would be claimed by {rto.subdomain} ({rto.id})")
            return pending

        claimed = await ApplicationService.claim_legacy_applications(session, rto.id)
        await session.commit()
        return claimed


def parse_args(argv: list[str] | None = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Assign legacy applications to an existing RTO")
    parser.add_argument("subdomain", help="Subdomain of the active RTO that inherits legacy applications")
    parser.add_argument("--dry-run", action="store_true", help="Only count the legacy applications")
    return parser.parse_args(argv)


async def run(args) -> int:
    await db_client.init_db()
    try:
        return await claim_legacy_for_subdomain(db_client.get_session_factory(), args.subdomain, args.dry_run)
    finally:
        await db_client.close_db()


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.log_level.upper())
    args = parse_args(argv)
    try:
        claimed = asyncio.run(run(args))
    except RtoNotFound:
        logger.error(f"No active RTO with subdomain '{args.subdomain}'")
        return 1
    print(f"{claimed} legacy applications {'pending' if args.dry_run else 'claimed'} for '{args.subdomain}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
