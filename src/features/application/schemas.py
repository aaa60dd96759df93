"""Application schemas (DTOs)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .models import ApplicationStatus


# Request schemas
class ApplicationCreateRequest(BaseModel):
    """Start a certification application."""

    certification_name: str = Field(..., min_length=1, max_length=255)
    user_id: str | None = Field(None, max_length=100)


# Response schemas
class ApplicationResponse(BaseModel):
    """Application response."""

    id: int
    rto_id: UUID | None = None
    user_id: str | None = None
    certification_name: str
    status: ApplicationStatus
    is_legacy: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ApplicationStatsResponse(BaseModel):
    """Application counts for one RTO, by status."""

    rto_id: UUID | None = None
    total: int
    by_status: dict[str, int]
