"""SQLAlchemy base models and utilities."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TimestampMixin:
    """Mixin for adding created_at and updated_at timestamp columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
        server_default=func.now(),
        server_onupdate=func.now(),
    )


class TenantScopedMixin:
    """Mixin for business records that may belong to an RTO.

    The column is nullable: rows written before multi-tenancy existed carry no
    rto_id and are called legacy records. Queries never read this column
    directly; they go through the scope builders in src.shared.tenancy.filters,
    which decide whether legacy rows are visible.

    Example:
        class Application(Base, TenantScopedMixin, TimestampMixin):
            __tablename__ = "applications"
            # ... other fields ...

    """

    rto_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )
