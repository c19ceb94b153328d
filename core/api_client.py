"""
HTTP client for the ZATCA compliance backend.

Every screen of the console maps to exactly one method here. The backend
owns CSR generation, signing, UBL assembly, QR payloads and the exchange
with the authority; this client only shapes requests and surfaces errors.

ENDPOINTS:
    POST /compliance/onboard        onboard()
    POST /compliance/issue-csid     issue_csid()
    POST /compliance/check          check_compliance()
    GET  /compliance/egs            list_egs()
    POST /compliance/submit         submit()
    POST /compliance/production     issue_production_csid()
    POST /invoice/sign              sign_invoice()
    GET  /invoice?commonName=...    list_invoices()
    GET  /invoice/:id               get_invoice()
    GET  /invoice/:id/zatca-response get_zatca_response()
    GET  /invoice/:id/pdf           download_invoice_pdf()

ERRORS:
    Non-2xx responses raise BackendRequestError whose message is the
    backend's own ``message`` field when present. Connection problems raise
    BackendUnavailableError. Nothing is retried.

Usage:
    client = ZatcaBackendClient("http://localhost:3000", timeout_seconds=30)
    properties = client.list_egs()
    result = client.sign_invoice(draft.to_request())
"""

from __future__ import annotations

import logging
from typing import Dict, Any, List, Optional
from urllib.parse import quote

import requests

from models.egs import EgsListItem
from .exceptions import (
    BackendRequestError,
    BackendUnavailableError,
    InvalidResponseError,
)


DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class ZatcaBackendClient:
    """
    Synchronous client for the compliance backend.

    One instance is created by the app factory and shared by all requests;
    the underlying ``requests.Session`` keeps connections alive.

    Attributes:
        base_url: Backend root URL without trailing slash
        timeout_seconds: Per-request timeout
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the backend client.

        Args:
            base_url: Backend root URL (e.g. "http://localhost:3000")
            timeout_seconds: Timeout applied to every request
            session: Optional pre-built session (tests inject a mock)
            logger: Logger instance (creates default if not provided)

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required - set ZATCA_API_URL")

        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)
        self._logger = logger or logging.getLogger("zatca_console.core.api_client")

    # =========================================================================
    # COMPLIANCE
    # =========================================================================

    def onboard(self, request) -> Dict[str, Any]:
        """
        Register a property and generate its CSR material.

        Returns:
            Backend response (privateKey, csr, message)
        """
        self._logger.info(f"Onboarding property {request.common_name}")
        return self._post("/compliance/onboard", request.to_payload())

    def issue_csid(self, request) -> Dict[str, Any]:
        """
        Exchange an OTP for a compliance certificate.

        Returns:
            Backend response (certificate, secret, requestId, message)
        """
        self._logger.info(f"Issuing compliance CSID for {request.common_name}")
        return self._post("/compliance/issue-csid", request.to_payload())

    def issue_production_csid(self, request) -> Dict[str, Any]:
        """Exchange the compliance certificate for a production certificate."""
        self._logger.info(f"Issuing production CSID for {request.common_name}")
        return self._post("/compliance/production", request.to_payload())

    def check_compliance(self, request) -> Dict[str, Any]:
        """
        Validate a signed invoice against the authority's compliance API.

        Returns:
            Backend response (validationResults, reportingStatus, ...)
        """
        self._logger.info(
            f"Checking compliance for {request.common_name}/{request.invoice_serial_number}"
        )
        return self._post("/compliance/check", request.to_payload())

    def submit(self, request) -> Dict[str, Any]:
        """
        Submit a signed invoice for clearance (standard) or reporting (simplified).

        Returns:
            Backend response (submissionType, zatcaStatus, validationResults, message)
        """
        self._logger.info(
            f"Submitting {request.invoice_serial_number} for {request.common_name}"
        )
        return self._post("/compliance/submit", request.to_payload())

    def list_egs(self) -> List[EgsListItem]:
        """
        List registered properties (EGS units).

        Returns:
            List of EgsListItem, in backend order
        """
        data = self._get("/compliance/egs")
        items = data if isinstance(data, list) else []
        self._logger.debug(f"Fetched {len(items)} registered properties")
        return [EgsListItem.from_dict(item) for item in items]

    # =========================================================================
    # INVOICES
    # =========================================================================

    def sign_invoice(self, request) -> Dict[str, Any]:
        """
        Sign an invoice and generate its XML and QR payload.

        Returns:
            Backend response (signedXml, qrCode, fileName, message)
        """
        self._logger.info(
            f"Signing invoice for {request.egs.common_name} "
            f"({len(request.line_items)} lines, payable {request.totals.payable_amount})"
        )
        return self._post("/invoice/sign", request.to_payload())

    def list_invoices(self, common_name: str) -> List[Dict[str, Any]]:
        """List invoices issued by one property."""
        data = self._get("/invoice", params={"commonName": common_name})
        invoices = data if isinstance(data, list) else []
        self._logger.debug(f"Fetched {len(invoices)} invoices for {common_name}")
        return invoices

    def get_invoice(self, invoice_id: str) -> Dict[str, Any]:
        """Fetch one invoice by number."""
        return self._get(f"/invoice/{quote(str(invoice_id), safe='')}")

    def get_zatca_response(self, invoice_id: str) -> Dict[str, Any]:
        """Fetch the raw authority response stored for an invoice."""
        return self._get(f"/invoice/{quote(str(invoice_id), safe='')}/zatca-response")

    def download_invoice_pdf(self, invoice_id: str) -> bytes:
        """
        Download the rendered PDF for an invoice.

        Returns:
            PDF bytes as produced by the backend
        """
        path = f"/invoice/{quote(str(invoice_id), safe='')}/pdf"
        response = self._request("GET", path, headers={"Accept": "application/pdf"})
        return response.content

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self._request("GET", path, params=params)
        return self._parse_json(response, path)

    def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        response = self._request("POST", path, json=payload)
        return self._parse_json(response, path)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Perform one HTTP call and raise on failure.

        Raises:
            BackendUnavailableError: On connection errors and timeouts
            BackendRequestError: On non-2xx responses
        """
        url = f"{self.base_url}{path}"
        self._logger.debug(f"{method} {url}")

        try:
            response = self._session.request(
                method, url, timeout=self.timeout_seconds, **kwargs
            )
        except requests.Timeout:
            self._logger.error(f"{method} {path} timed out after {self.timeout_seconds}s")
            raise BackendUnavailableError(
                url, f"timeout of {self.timeout_seconds:g}s exceeded"
            )
        except requests.ConnectionError as e:
            self._logger.error(f"{method} {path} failed: {e}")
            raise BackendUnavailableError(url)

        if not response.ok:
            payload = _safe_json(response)
            message = extract_error_message(payload, response.status_code)
            self._logger.warning(
                f"{method} {path} returned {response.status_code}: {message}"
            )
            raise BackendRequestError(
                message,
                status_code=response.status_code,
                method=method,
                path=path,
                payload=payload,
            )

        return response

    def _parse_json(self, response: requests.Response, path: str) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            self._logger.error(f"Invalid JSON from {path}")
            raise InvalidResponseError(path, response.status_code)


def _safe_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def extract_error_message(payload: Any, status_code: int) -> str:
    """
    Pick the user-facing message out of an error body.

    The backend reports validation failures as a list of strings in
    ``message``; those are joined with "; ". Falls back to ``error`` and then
    to a generic status line.
    """
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, list):
            parts = [str(m) for m in message if m]
            if parts:
                return "; ".join(parts)
        elif message:
            return str(message)

        error = payload.get("error")
        if error:
            return str(error)

    return f"Request failed with status code {status_code}"
