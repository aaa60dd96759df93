"""Application-related exceptions."""

from fastapi import HTTPException, status


class ApplicationNotFound(HTTPException):
    """Raised when an application is missing or outside the request's RTO."""

    def __init__(self):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
