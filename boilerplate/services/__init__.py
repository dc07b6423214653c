"""Service layer: auth tokens and file uploads."""
from boilerplate.services.token_service import TokenService
from boilerplate.services.upload_service import StoredFile, UploadService

__all__ = [
    "TokenService",
    "UploadService",
    "StoredFile",
]
