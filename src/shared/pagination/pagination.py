"""Pagination models for list endpoints."""

from collections.abc import Sequence

from pydantic import BaseModel, Field


class PaginationParams(BaseModel):
    """Query parameters for pagination.

    Used as a dependency in FastAPI routes:
    ```python
    @router.get("/applications")
    async def list_applications(pagination: PaginationParams = Depends()):
        ...
    ```

    Omitting page or page_size (passing an empty value) returns every row.
    """

    page: int | None = Field(default=1, ge=1, description="Page number (1-indexed)")
    page_size: int | None = Field(default=50, ge=1, le=1000, description="Items per page")

    @property
    def skip(self) -> int:
        if not self.is_paginated:
            return 0
        return (self.page - 1) * self.page_size  # type: ignore[operator]

    @property
    def limit(self) -> int | None:
        return self.page_size

    @property
    def is_paginated(self) -> bool:
        return self.page is not None and self.page_size is not None


class PaginatedResponse[T](BaseModel):
    """Generic page of items plus the total matching count."""

    items: list[T]
    total: int
    page: int | None = None
    page_size: int | None = None

    @classmethod
    def from_page(cls, items: Sequence[T], total: int, pagination: PaginationParams) -> "PaginatedResponse[T]":
        return cls(items=list(items), total=total, page=pagination.page, page_size=pagination.page_size)

    @property
    def total_pages(self) -> int | None:
        """Number of pages, None when not paginated."""
        if self.page is None or not self.page_size:
            return None
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        pages = self.total_pages
        return pages is not None and self.page is not None and self.page < pages


__all__ = ["PaginatedResponse", "PaginationParams"]
