"""
Core module for the ZATCA compliance console.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- api_client: HTTP client for the compliance backend
"""

from .exceptions import (
    ZatcaConsoleError,
    BackendUnavailableError,
    BackendRequestError,
    InvalidResponseError,
    FormValidationError,
)
from .api_client import ZatcaBackendClient

__all__ = [
    "ZatcaConsoleError",
    "BackendUnavailableError",
    "BackendRequestError",
    "InvalidResponseError",
    "FormValidationError",
    "ZatcaBackendClient",
]
