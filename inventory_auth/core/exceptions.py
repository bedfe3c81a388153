"""
Inventory Auth API - Custom Exceptions
"""

from typing import Optional, Dict, Any
from fastapi import HTTPException, status


class InventoryAuthException(HTTPException):
    """Base exception for the Inventory Auth API."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.extra = extra or {}


class AuthenticationError(InventoryAuthException):
    """Missing, invalid or expired session, or bad credentials."""

    def __init__(self, detail: str = "Not authenticated", redirect_to: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHENTICATED",
            extra={"redirect_to": redirect_to} if redirect_to else {},
            headers={"X-Redirect-To": redirect_to} if redirect_to else None
        )


class RateLimitedError(InventoryAuthException):
    """Identity provider throttled the request."""

    def __init__(self, detail: str = "Too many failed attempts. Please try again later."):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail,
            error_code="RATE_LIMITED"
        )


class NotFoundError(InventoryAuthException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str = None):
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} '{identifier}' not found"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class ValidationError(InventoryAuthException):
    """Validation error."""

    def __init__(self, detail: str, field: str = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="VALIDATION_ERROR",
            extra={"field": field} if field else {}
        )


class PermissionDeniedError(InventoryAuthException):
    """Permission denied."""

    def __init__(self, detail: str = "Permission denied", redirect_to: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="PERMISSION_DENIED",
            extra={"redirect_to": redirect_to} if redirect_to else {},
            headers={"X-Redirect-To": redirect_to} if redirect_to else None
        )


class DuplicateError(InventoryAuthException):
    """Duplicate resource error."""

    def __init__(self, resource: str, identifier: str = None, detail: str = None):
        if not detail:
            detail = f"{resource} already exists"
            if identifier:
                detail = f"{resource} '{identifier}' already exists"
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="DUPLICATE"
        )


class BackendError(InventoryAuthException):
    """Supabase call failed."""

    def __init__(self, operation: str, detail: str = None):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail or f"Error calling {operation}",
            error_code="BACKEND_ERROR",
            extra={"operation": operation}
        )


# ==================== Provider error codes ====================

# GoTrue error codes (AuthApiError.code) mapped to user-facing messages, per form.
LOGIN_ERROR_MESSAGES = {
    "invalid_credentials": "Invalid username or password",
    "user_not_found": "Invalid username or password",
}

CREATE_USER_ERROR_MESSAGES = {
    "email_exists": "Email is already in use",
    "user_already_exists": "Email is already in use",
    "email_address_invalid": "Invalid email address",
    "validation_failed": "Invalid email address",
    "weak_password": "Password should be at least 6 characters",
}

PROFILE_ERROR_MESSAGES = {
    "invalid_credentials": "Current password is incorrect",
    "email_exists": "Email is already in use by another account",
    "user_already_exists": "Email is already in use by another account",
    "email_address_invalid": "Invalid email address",
    "validation_failed": "Invalid email address",
    "reauthentication_needed": "Please log out and log back in to change your email or password",
    "session_expired": "Please log out and log back in to change your email or password",
}

RATE_LIMIT_CODES = {"over_request_rate_limit", "over_email_send_rate_limit"}


def provider_error_code(error: Exception) -> Optional[str]:
    """Extract the provider error code from a supabase auth error, if any."""
    code = getattr(error, "code", None)
    if code:
        return str(code)
    if getattr(error, "status", None) == 429:
        return "over_request_rate_limit"
    return None


def is_rate_limited(error: Exception) -> bool:
    return provider_error_code(error) in RATE_LIMIT_CODES


def provider_error_message(
    error: Exception,
    messages: Dict[str, str],
    default: str
) -> str:
    """Translate a provider error into a user-facing message."""
    code = provider_error_code(error)
    if code in RATE_LIMIT_CODES:
        return "Too many failed attempts. Please try again later."
    return messages.get(code, default)
