"""SQLAlchemy query helpers for tenant-scoped pagination."""

from typing import TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.base import Base
from src.shared.tenancy.filters import UNSCOPED, TenantScope

from .pagination import PaginationParams

ModelType = TypeVar("ModelType", bound=Base)


class SQLAlchemyPagination:
    """Helper class for paginating tenant-scoped SQLAlchemy queries."""

    @staticmethod
    async def paginate(
        session: AsyncSession,
        model: type[ModelType],
        pagination: PaginationParams,
        scope: TenantScope = UNSCOPED,
        filters: list | None = None,
        order_by: list | None = None,
    ) -> tuple[list[ModelType], int]:
        """Paginate a query on a model carrying TenantScopedMixin.

        The tenant scope is applied to both the page query and the count, and
        ANDed with the caller's own filters.

        Args:
            session: Database session
            model: SQLAlchemy model class with an rto_id column
            pagination: PaginationParams with page and page_size
            scope: Tenant scope from the request's TenantContext
            filters: Optional list of SQLAlchemy filter conditions
            order_by: Optional ordering clauses

        Returns:
            Tuple of (items, total_count)

        Example:
            ```python
            items, total = await SQLAlchemyPagination.paginate(
                session,
                Application,
                pagination,
                scope=context.legacy_inclusive_scope(),
                filters=[Application.status == "submitted"],
            )
            ```

        """
        conditions = [*(filters or [])]
        if scope.is_scoped:
            conditions.insert(0, scope.clause(model.rto_id))

        stmt = select(model).where(*conditions)
        count_stmt = select(func.count()).select_from(model).where(*conditions)

        total_result = await session.execute(count_stmt)
        total = total_result.scalar_one()

        if order_by:
            stmt = stmt.order_by(*order_by)
        if pagination.is_paginated:
            stmt = stmt.offset(pagination.skip).limit(pagination.limit)

        result = await session.execute(stmt)
        items = list(result.scalars().all())

        return items, total


__all__ = ["SQLAlchemyPagination"]
