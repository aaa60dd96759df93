"""RTO (tenant) domain models."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from src.database.base import Base, TimestampMixin

DEFAULT_FEATURES: dict[str, bool] = {
    "assessors": True,
    "salesAgents": False,
    "certificates": True,
    "formTemplates": True,
}


def default_rto_settings() -> dict[str, Any]:
    """Fresh settings document for a new RTO (never share the dict between rows)."""
    return {"features": dict(DEFAULT_FEATURES)}


class Rto(Base, TimestampMixin):
    """Registered training organisation, the tenant of the platform.

    Globally-scoped model: the directory of tenants is not itself tenant-scoped.
    A subdomain identifies at most one active RTO; deactivated RTOs keep their
    subdomain, so uniqueness is enforced by a partial index over active rows only.
    """

    __tablename__ = "rtos"
    __table_args__ = (
        Index(
            "uq_rtos_active_subdomain",
            "subdomain",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Identity
    subdomain: Mapped[str] = mapped_column(String(63), nullable=False, index=True)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    ceo_name: Mapped[str] = mapped_column(String(255), nullable=False)
    ceo_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Contact
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)

    # Registration
    rto_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    registration_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expiry_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="1", index=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")

    # Configuration
    settings: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=default_rto_settings)

    # Audit
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    @property
    def features(self) -> dict[str, bool]:
        """Feature flags map (empty when the settings document has none)."""
        return dict((self.settings or {}).get("features") or {})

    def has_feature(self, name: str) -> bool:
        """Check if a feature flag is enabled for this RTO."""
        return bool(self.features.get(name, False))

    def full_domain(self, base_domain: str) -> str:
        """Public host name of this RTO under the platform base domain."""
        return f"{self.subdomain}.{base_domain}"

    def is_operational(self, now: datetime | None = None) -> bool:
        """Active, verified and not past its registration expiry."""
        now = now or datetime.now(UTC)
        expiry = self.expiry_date
        if expiry is not None and expiry.tzinfo is None:
            # SQLite hands back naive datetimes
            expiry = expiry.replace(tzinfo=UTC)
        return self.is_active and self.is_verified and (expiry is None or expiry > now)
