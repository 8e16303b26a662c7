"""HTTP clients for the portal API and the upload backend."""

from .client import (
    APIError,
    LogicalFailureError,
    PortalAPIClient,
    TransientNetworkError,
    UploadAPIClient,
)

__all__ = [
    "APIError",
    "LogicalFailureError",
    "PortalAPIClient",
    "TransientNetworkError",
    "UploadAPIClient",
]
