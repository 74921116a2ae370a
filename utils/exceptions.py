"""
Typed failures raised by the session layer.

Each class carries the HTTP status and error code the error boundary in
api.errors turns into a response. An instance may override the status when
the same failure is reported differently by different flows.
"""
from __future__ import annotations


class ApiError(Exception):
    status_code = 500
    error = "INTERNAL_ERROR"
    message = "Something went wrong"

    def __init__(self, message: str | None = None, status_code: int | None = None, errors=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors


class ValidationError(ApiError):
    status_code = 400
    error = "VALIDATION_ERROR"
    message = "Missing required fields"


class Unauthenticated(ApiError):
    status_code = 401
    error = "UNAUTHENTICATED"
    message = "Unauthorized request"


class InvalidCredential(ApiError):
    status_code = 401
    error = "INVALID_CREDENTIAL"
    message = "Invalid credentials"


class PrincipalNotFound(ApiError):
    status_code = 404
    error = "USER_NOT_FOUND"
    message = "User not found"


class MissingRefreshToken(ApiError):
    status_code = 401
    error = "MISSING_REFRESH_TOKEN"
    message = "Refresh token missing. Please log in again."


class InvalidRefreshToken(ApiError):
    status_code = 401
    error = "INVALID_REFRESH_TOKEN"
    message = "Invalid or expired refresh token. Please log in again."


class RefreshTokenMismatch(ApiError):
    status_code = 403
    error = "REFRESH_TOKEN_MISMATCH"
    message = "Refresh token mismatch. Please log in again."


class UserAlreadyExists(ApiError):
    status_code = 409
    error = "CONFLICT"
    message = "User with this username or email already exists"
