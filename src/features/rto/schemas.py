"""RTO schemas (DTOs)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class RtoPublicResponse(BaseModel):
    """Public RTO information (branding and status, no contact details)."""

    id: UUID
    subdomain: str
    company_name: str
    is_active: bool
    is_verified: bool
    registration_date: datetime
    expiry_date: datetime
    features: dict[str, bool] = Field(default_factory=dict)

    model_config = {"from_attributes": True}


class TenantContextResponse(BaseModel):
    """The tenant context resolved for the current request."""

    rto_id: UUID | None = None
    is_tenant_context: bool = False
    source: str
    full_domain: str | None = None
    rto: RtoPublicResponse | None = None
