"""RTO-related exceptions."""

from fastapi import HTTPException, status


class RtoException(HTTPException):
    """Base RTO exception."""

    def __init__(self, detail: str = "RTO operation failed", status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class RtoNotFound(RtoException):
    """Raised when no active RTO matches the requested subdomain or id."""

    def __init__(self):
        super().__init__(detail="RTO not found", status_code=status.HTTP_404_NOT_FOUND)


class TenantContextRequired(RtoException):
    """Raised when a tenant-only route is reached without a resolved RTO."""

    def __init__(self):
        super().__init__(detail="This endpoint requires an RTO subdomain or RTO override")


# Directory / resolution errors. These never leave the resolver: they are
# caught there and degrade the request to the global (no tenant) context.


class TenantResolutionError(Exception):
    """Base exception for tenant directory and resolution failures."""

    pass


class DirectoryUnavailable(TenantResolutionError):
    """Raised when the tenant directory cannot be reached or queried."""

    pass


class DuplicateKey(TenantResolutionError):
    """Raised when creating an RTO collides with a unique field."""

    def __init__(self, message: str, subdomain: str | None = None):
        super().__init__(message)
        self.subdomain = subdomain


class TenantInactive(TenantResolutionError):
    """Raised when the only RTO matching a subdomain is deactivated."""

    def __init__(self, subdomain: str):
        super().__init__(f"RTO for subdomain '{subdomain}' is inactive")
        self.subdomain = subdomain


class MalformedHost(TenantResolutionError):
    """Raised when a host header cannot be parsed into a subdomain label."""

    def __init__(self, host: str | None):
        super().__init__(f"Cannot extract a subdomain from host {host!r}")
        self.host = host
