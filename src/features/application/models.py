"""Certification application models."""

from enum import StrEnum

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database.base import Base, TenantScopedMixin, TimestampMixin


class ApplicationStatus(StrEnum):
    """Lifecycle of a certification application."""

    INITIATED = "initiated"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    CERTIFICATE_ISSUED = "certificate_issued"


class Application(Base, TenantScopedMixin, TimestampMixin):
    """A user's application for a certification.

    Tenant-scoped model: rows carry the RTO they were submitted to. Rows
    created before multi-tenancy have no rto_id (legacy records).
    """

    __tablename__ = "applications"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Applicant (opaque id from the auth layer)
    user_id: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    certification_name: Mapped[str] = mapped_column(String(255), nullable=False)

    status: Mapped[str] = mapped_column(
        Enum(ApplicationStatus, native_enum=False, length=50, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ApplicationStatus.INITIATED.value,
        server_default=ApplicationStatus.INITIATED.value,
        index=True,
    )

    @property
    def is_legacy(self) -> bool:
        """Created before multi-tenancy (no RTO association)."""
        return self.rto_id is None
