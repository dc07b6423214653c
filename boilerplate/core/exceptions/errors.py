"""
Built-in exception types. Add new ones here or via exception_factory().
"""
from __future__ import annotations

from boilerplate.core.exceptions.base import ProjectError


class ConfigurationError(ProjectError):
    """Invalid or missing configuration (e.g. TOKEN_SECRET unset)."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class ValidationError(ProjectError):
    """Request parameters are missing or malformed."""

    default_code = "VALIDATION_ERROR"
    default_http_status = 400


class UnauthorizedError(ProjectError):
    """Not authenticated, or the bearer token is expired or invalid."""

    default_code = "UNAUTHORIZED"
    default_http_status = 401


class ForbiddenError(ProjectError):
    """Authenticated but not allowed."""

    default_code = "FORBIDDEN"
    default_http_status = 403


class NotFoundError(ProjectError):
    """Requested resource not found."""

    default_code = "NOT_FOUND"
    default_http_status = 404


class ConflictError(ProjectError):
    """Resource state conflict (e.g. duplicate unique value)."""

    default_code = "CONFLICT"
    default_http_status = 409


class PayloadTooLargeError(ProjectError):
    """Request body or uploaded file exceeds the configured limit."""

    default_code = "PAYLOAD_TOO_LARGE"
    default_http_status = 413


class RateLimitError(ProjectError):
    """Rate limit exceeded."""

    default_code = "RATE_LIMIT"
    default_http_status = 429


class ExternalServiceError(ProjectError):
    """Database or other backing service failed."""

    default_code = "EXTERNAL_SERVICE_ERROR"
    default_http_status = 502


class UploadError(ProjectError):
    """Multipart upload rejected (no file, unexpected field, bad filename)."""

    default_code = "UPLOAD_ERROR"
    default_http_status = 400
