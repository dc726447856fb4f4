"""
Error taxonomy shared by every service.

Each error is an HTTPException so services can raise it directly and FastAPI
renders it; `kind` lets callers tell the failures apart without parsing text.
"""
from fastapi import HTTPException


class GymDeskError(HTTPException):
    kind = "error"
    status_code = 500

    def __init__(self, detail: str, headers: dict = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class Unauthorized(GymDeskError):
    kind = "unauthorized"
    status_code = 401

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class NotFound(GymDeskError):
    kind = "not_found"
    status_code = 404


class ValidationError(GymDeskError):
    kind = "validation_error"
    status_code = 422


class Conflict(GymDeskError):
    kind = "conflict"
    status_code = 409


class UpstreamError(GymDeskError):
    """The payment gateway (or another external collaborator) failed."""
    kind = "upstream_error"
    status_code = 502
