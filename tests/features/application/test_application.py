"""Tests for tenant-scoped application endpoints and service."""

from sqlalchemy import select

from src.features.application.models import Application, ApplicationStatus
from src.features.application.schemas import ApplicationCreateRequest
from src.features.application.service import ApplicationService
from src.shared.pagination.pagination import PaginationParams
from src.shared.tenancy.context import ResolutionSource, TenantContext

ACME_HOST = {"host": "acme.example.com"}
GLOBEX_HOST = {"host": "globex.example.com"}


class TestApplicationService:
    """Tests for ApplicationService with explicit tenant contexts."""

    async def test_create_tags_application_with_rto(self, session, make_rto):
        acme = await make_rto("acme")

        application = await ApplicationService.create_application(
            session, acme.id, ApplicationCreateRequest(certification_name="Cert IV in Training")
        )
        await session.commit()

        assert application.rto_id == acme.id
        assert application.is_legacy is False
        assert application.status == ApplicationStatus.INITIATED

    async def test_list_is_legacy_inclusive(self, session, make_rto, make_application):
        acme = await make_rto("acme")
        globex = await make_rto("globex")
        await make_application(rto_id=acme.id, certification_name="acme")
        await make_application(rto_id=globex.id, certification_name="globex")
        await make_application(rto_id=None, certification_name="legacy")

        context = TenantContext.for_rto(acme, ResolutionSource.SUBDOMAIN)
        items, total = await ApplicationService.list_applications(session, context, PaginationParams())

        assert total == 2
        assert [a.certification_name for a in items] == ["acme", "legacy"]

    async def test_list_in_global_context_is_unscoped(self, session, make_rto, make_application):
        acme = await make_rto("acme")
        await make_application(rto_id=acme.id)
        await make_application(rto_id=None)

        _, total = await ApplicationService.list_applications(session, TenantContext.empty(), PaginationParams())

        assert total == 2

    async def test_stats_are_strict(self, session, make_rto, make_application):
        acme = await make_rto("acme")
        await make_application(rto_id=acme.id, status=ApplicationStatus.APPROVED)
        await make_application(rto_id=acme.id, status=ApplicationStatus.APPROVED)
        await make_application(rto_id=acme.id, status=ApplicationStatus.SUBMITTED)
        await make_application(rto_id=None, status=ApplicationStatus.APPROVED)

        stats = await ApplicationService.get_stats(session, TenantContext.for_rto(acme, ResolutionSource.SUBDOMAIN))

        assert stats == {"approved": 2, "submitted": 1}

    async def test_claim_legacy(self, session, session_factory, make_rto, make_application):
        acme = await make_rto("acme")
        globex = await make_rto("globex")
        await make_application(rto_id=None)
        await make_application(rto_id=None)
        await make_application(rto_id=globex.id)

        claimed = await ApplicationService.claim_legacy_applications(session, acme.id)
        await session.commit()

        assert claimed == 2
        async with session_factory() as fresh:
            result = await fresh.execute(select(Application.rto_id))
            owners = sorted(str(r) for r in result.scalars().all())
        assert owners == sorted([str(acme.id), str(acme.id), str(globex.id)])


class TestApplicationEndpoints:
    """Tests for /api/applications through the tenant middleware."""

    async def test_create_on_rto_host(self, client):
        response = await client.post(
            "/api/applications",
            json={"certification_name": "Diploma of Leadership"},
            headers=ACME_HOST,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["rto_id"] is not None
        assert body["is_legacy"] is False
        assert body["status"] == "initiated"

        current = await client.get("/api/rto/current", headers=ACME_HOST)
        assert body["rto_id"] == current.json()["rto_id"]

    async def test_rtos_do_not_see_each_other(self, client, make_rto, make_application):
        acme = await make_rto("acme")
        globex = await make_rto("globex")
        await make_application(rto_id=acme.id, certification_name="acme")
        globex_app = await make_application(rto_id=globex.id, certification_name="globex")
        await make_application(rto_id=None, certification_name="legacy")

        response = await client.get("/api/applications", headers=ACME_HOST)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert {a["certification_name"] for a in body["items"]} == {"acme", "legacy"}

        detail = await client.get(f"/api/applications/{globex_app.id}", headers=ACME_HOST)
        assert detail.status_code == 404

    async def test_legacy_application_visible_to_every_rto(self, client, make_rto, make_application):
        await make_rto("acme")
        await make_rto("globex")
        legacy = await make_application(rto_id=None)

        for headers in (ACME_HOST, GLOBEX_HOST):
            response = await client.get(f"/api/applications/{legacy.id}", headers=headers)
            assert response.status_code == 200
            assert response.json()["is_legacy"] is True

    async def test_global_context_lists_everything(self, client, make_rto, make_application):
        acme = await make_rto("acme")
        globex = await make_rto("globex")
        await make_application(rto_id=acme.id)
        await make_application(rto_id=globex.id)
        await make_application(rto_id=None)

        response = await client.get("/api/applications")

        assert response.json()["total"] == 3

    async def test_status_filter_and_pagination(self, client, make_rto, make_application):
        acme = await make_rto("acme")
        for _ in range(3):
            await make_application(rto_id=acme.id, status=ApplicationStatus.SUBMITTED)
        await make_application(rto_id=acme.id, status=ApplicationStatus.REJECTED)

        response = await client.get(
            "/api/applications",
            params={"status": "submitted", "page": 2, "page_size": 2},
            headers=ACME_HOST,
        )

        body = response.json()
        assert body["total"] == 3
        assert len(body["items"]) == 1
        assert body["page"] == 2

    async def test_stats_endpoint_excludes_legacy(self, client, make_rto, make_application):
        acme = await make_rto("acme")
        await make_application(rto_id=acme.id, status=ApplicationStatus.APPROVED)
        await make_application(rto_id=None, status=ApplicationStatus.APPROVED)

        response = await client.get("/api/applications/stats", headers=ACME_HOST)

        body = response.json()
        assert body["rto_id"] == str(acme.id)
        assert body["total"] == 1
        assert body["by_status"] == {"approved": 1}

    async def test_requests_cannot_adopt_legacy_applications(self, client, make_rto, make_application):
        await make_rto("acme")
        legacy = await make_application(rto_id=None)

        response = await client.post("/api/applications/claim-legacy", headers={"host": "evil.example.com"})

        assert response.status_code in (404, 405)
        listing = await client.get("/api/applications", headers=ACME_HOST)
        assert [a["id"] for a in listing.json()["items"]] == [legacy.id]
        assert listing.json()["items"][0]["is_legacy"] is True

    async def test_create_without_rto_rejected(self, client, make_rto):
        await make_rto("acme")

        response = await client.post("/api/applications", json={"certification_name": "Diploma of Leadership"})

        assert response.status_code == 400
        listing = await client.get("/api/applications", headers=ACME_HOST)
        assert listing.json()["total"] == 0
