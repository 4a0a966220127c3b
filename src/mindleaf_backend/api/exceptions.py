from typing import Any, Dict, Optional
from fastapi import HTTPException, status

class ApiException(HTTPException):
    """HTTP error carrying a stable, machine readable reason."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
    default_reason = "internal_error"

    def __init__(self, detail: Any = None, reason: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = self.default_status
        self.detail = detail or self.default_detail
        self.reason = reason or self.default_reason

class NotFoundException(ApiException):
    default_status = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_reason = "not_found"

class ForbiddenException(ApiException):
    default_status = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"
    default_reason = "forbidden"

class BadRequestException(ApiException):
    default_status = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"
    default_reason = "invalid_input"

class UnauthorizedException(ApiException):
    default_status = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"
    default_reason = "not_authenticated"

    def __init__(self, detail: Any = None, reason: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail, reason, headers or {"WWW-Authenticate": "Bearer"})

class ConflictException(ApiException):
    default_status = status.HTTP_409_CONFLICT
    default_detail = "Conflict"
    default_reason = "conflict"

class InternalServerException(ApiException):
    pass

_STATUS_REASONS = {
    status.HTTP_400_BAD_REQUEST: "invalid_input",
    status.HTTP_401_UNAUTHORIZED: "not_authenticated",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
}

def reason_for(exc: HTTPException) -> str:
    reason = getattr(exc, "reason", None)
    if reason:
        return reason
    return _STATUS_REASONS.get(exc.status_code, "internal_error" if exc.status_code >= 500 else "http_error")
