"""
Project exception system.

Usage:
    from boilerplate.core.exceptions import ProjectError, ValidationError, exception_factory

    # Built-in types
    raise ValidationError("id is required", details={"field": "id"})

    # Add new type on demand
    QuotaError = exception_factory("QuotaError", code="QUOTA_EXCEEDED", http_status=429)
    raise QuotaError("Upload quota reached")
"""
from boilerplate.core.exceptions.base import ProjectError, exception_factory
from boilerplate.core.exceptions.errors import (
    ConfigurationError,
    ConflictError,
    ExternalServiceError,
    ForbiddenError,
    NotFoundError,
    PayloadTooLargeError,
    RateLimitError,
    UnauthorizedError,
    UploadError,
    ValidationError,
)

__all__ = [
    "ProjectError",
    "exception_factory",
    "ConfigurationError",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "PayloadTooLargeError",
    "RateLimitError",
    "ExternalServiceError",
    "UploadError",
]
