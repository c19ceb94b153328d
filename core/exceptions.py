"""
Custom exceptions for the ZATCA compliance console.

Exception Hierarchy:
    ZatcaConsoleError (base)
    ├── BackendUnavailableError - Backend unreachable or timed out
    ├── BackendRequestError     - Backend answered with a non-2xx status
    ├── InvalidResponseError    - Backend answered 2xx with a non-JSON body
    └── FormValidationError     - Required form fields missing or invalid

Usage:
    Screens catch ZatcaConsoleError and render ``error.message`` as an
    inline alert. There is no retry and no further classification.
"""

from typing import Optional, Dict, Any


class ZatcaConsoleError(Exception):
    """
    Base exception for all console errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message (shown to the user)
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# BACKEND ERRORS
# =============================================================================

class BackendUnavailableError(ZatcaConsoleError):
    """
    The compliance backend could not be reached.

    Typical causes:
    - Backend service not running
    - Wrong ZATCA_API_URL in .env
    - Request exceeded ZATCA_API_TIMEOUT
    """

    def __init__(self, url: str, reason: str = "Network Error"):
        details = {
            "url": url,
            "resolution": "Ensure the compliance backend is running and ZATCA_API_URL is correct"
        }
        super().__init__(reason, details)
        self.url = url


class BackendRequestError(ZatcaConsoleError):
    """
    The backend rejected the request (4xx/5xx).

    ``message`` is whatever the backend put in its ``message`` field,
    falling back to a generic status line.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        method: str = "",
        path: str = "",
        payload: Any = None,
    ):
        details = {"status_code": status_code}
        if method:
            details["method"] = method
        if path:
            details["path"] = path
        super().__init__(message, details)
        self.status_code = status_code
        self.method = method
        self.path = path
        self.payload = payload


class InvalidResponseError(ZatcaConsoleError):
    """Backend returned a success status with a body that is not JSON."""

    def __init__(self, path: str, status_code: int):
        message = f"Invalid JSON in response from {path}"
        super().__init__(message, {"path": path, "status_code": status_code})
        self.path = path
        self.status_code = status_code


# =============================================================================
# FORM ERRORS
# =============================================================================

class FormValidationError(ZatcaConsoleError):
    """
    One or more form fields failed validation.

    ``errors`` maps field names (e.g. ``lineItems-0-description``)
    to a short message rendered under the field.
    """

    def __init__(self, errors: Dict[str, str]):
        count = len(errors)
        noun = "field" if count == 1 else "fields"
        message = f"Please complete the required {noun} ({count})."
        super().__init__(message, {"fields": sorted(errors)})
        self.errors = errors
