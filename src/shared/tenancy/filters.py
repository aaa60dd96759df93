"""Tenant scope predicates for data access.

Every query on a tenant-scoped model goes through one of the two builders
below. They are pure: no I/O, no validation that the RTO exists (that is the
resolver's job). The returned TenantScope is a typed value rather than a dict,
so callers combine it with their own conditions explicitly:

    scope = legacy_inclusive_filter(context.rto_id)
    stmt = select(Application).where(scope.clause(Application.rto_id), Application.status == "submitted")
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, or_, true


class ScopeMode(StrEnum):
    """How a scope restricts the rto_id column."""

    UNSCOPED = "unscoped"
    STRICT = "strict"
    LEGACY_INCLUSIVE = "legacy_inclusive"


@dataclass(frozen=True)
class TenantScope:
    """Immutable tenant predicate.

    UNSCOPED matches every row (no tenant context: global/legacy behaviour).
    STRICT matches rows whose rto_id equals the RTO id.
    LEGACY_INCLUSIVE additionally matches rows whose rto_id is NULL.
    """

    mode: ScopeMode
    rto_id: UUID | None = None

    def __post_init__(self):
        if self.mode is ScopeMode.UNSCOPED and self.rto_id is not None:
            raise ValueError("An unscoped TenantScope cannot carry an rto_id")
        if self.mode is not ScopeMode.UNSCOPED and self.rto_id is None:
            raise ValueError(f"A {self.mode} TenantScope requires an rto_id")

    @property
    def is_scoped(self) -> bool:
        return self.mode is not ScopeMode.UNSCOPED

    def clause(self, column: Any) -> ColumnElement[bool]:
        """Render the scope as a SQLAlchemy condition on the given column."""
        if self.mode is ScopeMode.STRICT:
            return column == self.rto_id
        if self.mode is ScopeMode.LEGACY_INCLUSIVE:
            return or_(column == self.rto_id, column.is_(None))
        return true()

    def apply(self, stmt, model):
        """AND the scope into a Select/Update/Delete on a TenantScopedMixin model."""
        if not self.is_scoped:
            return stmt
        return stmt.where(self.clause(model.rto_id))

    def matches(self, record_rto_id: UUID | None) -> bool:
        """Evaluate the scope against a record's rto_id in memory."""
        if self.mode is ScopeMode.STRICT:
            return record_rto_id == self.rto_id
        if self.mode is ScopeMode.LEGACY_INCLUSIVE:
            return record_rto_id is None or record_rto_id == self.rto_id
        return True


UNSCOPED = TenantScope(ScopeMode.UNSCOPED)


def strict_filter(rto_id: UUID | None) -> TenantScope:
    """Scope to one RTO's records only; legacy records are excluded.

    Returns UNSCOPED when there is no RTO id.
    """
    if rto_id is None:
        return UNSCOPED
    return TenantScope(ScopeMode.STRICT, rto_id)


def legacy_inclusive_filter(rto_id: UUID | None) -> TenantScope:
    """Scope to one RTO's records plus all legacy (untagged) records.

    Listing and administrative operations use this so data created before
    multi-tenancy stays visible. Returns UNSCOPED when there is no RTO id.
    """
    if rto_id is None:
        return UNSCOPED
    return TenantScope(ScopeMode.LEGACY_INCLUSIVE, rto_id)


__all__ = ["UNSCOPED", "ScopeMode", "TenantScope", "legacy_inclusive_filter", "strict_filter"]
