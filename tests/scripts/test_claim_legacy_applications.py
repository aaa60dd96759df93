"""Tests for the legacy application claim script."""

import pytest
from sqlalchemy import select

from src.features.application.models import Application
from src.features.rto.exceptions import RtoNotFound
from src.features.rto.models import Rto
from src.scripts.claim_legacy_applications import claim_legacy_for_subdomain, parse_args


async def owners(session_factory) -> list:
    async with session_factory() as session:
        result = await session.execute(select(Application.rto_id).order_by(Application.id))
        return list(result.scalars().all())


class TestClaimLegacyForSubdomain:
    """Tests for claim_legacy_for_subdomain()"""

    async def test_claims_untagged_applications(self, session_factory, make_rto, make_application):
        acme = await make_rto("acme")
        globex = await make_rto("globex")
        await make_application(rto_id=None)
        await make_application(rto_id=globex.id)
        await make_application(rto_id=None)

        claimed = await claim_legacy_for_subdomain(session_factory, "ACME")

        assert claimed == 2
        assert await owners(session_factory) == [acme.id, globex.id, acme.id]

    async def test_dry_run_changes_nothing(self, session_factory, make_rto, make_application):
        await make_rto("acme")
        await make_application(rto_id=None)

        pending = await claim_legacy_for_subdomain(session_factory, "acme", dry_run=True)

        assert pending == 1
        assert await owners(session_factory) == [None]

    async def test_unknown_subdomain_is_rejected_and_not_provisioned(self, session_factory, make_application):
        await make_application(rto_id=None)

        with pytest.raises(RtoNotFound):
            await claim_legacy_for_subdomain(session_factory, "evil")

        assert await owners(session_factory) == [None]
        async with session_factory() as session:
            assert (await session.execute(select(Rto))).first() is None

    async def test_inactive_rto_is_rejected(self, session_factory, make_rto, make_application):
        await make_rto("acme", is_active=False)
        await make_application(rto_id=None)

        with pytest.raises(RtoNotFound):
            await claim_legacy_for_subdomain(session_factory, "acme")


def test_parse_args():
    args = parse_args(["acme", "--dry-run"])

    assert args.subdomain == "acme"
    assert args.dry_run is True
    assert parse_args(["acme"]).dry_run is False
