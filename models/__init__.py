"""
Data models for the ZATCA compliance console.

This module contains dataclasses mirroring the backend's DTOs:
- EgsListItem: A registered property (EGS unit)
- Compliance requests: onboarding, CSID issuance, check, submit
- InvoiceDraft / SignInvoiceRequest: Invoice form state and sign payload
- ZatcaSubmissionResult: Clearance/reporting outcome

None of these are persisted; they live for one request.
"""

from .egs import EgsListItem, find_by_slug
from .compliance import (
    OnboardEgsRequest,
    IssueCsidRequest,
    ProductionCsidRequest,
    CheckComplianceRequest,
    SubmitZatcaRequest,
)
from .invoice import (
    InvoiceDraft,
    InvoiceLineItem,
    InvoiceTotals,
    SignInvoiceRequest,
    calculate_totals,
)
from .submission import StatusTone, ZatcaSubmissionResult, status_tone

__all__ = [
    # Property models
    "EgsListItem",
    "find_by_slug",
    # Compliance requests
    "OnboardEgsRequest",
    "IssueCsidRequest",
    "ProductionCsidRequest",
    "CheckComplianceRequest",
    "SubmitZatcaRequest",
    # Invoice models
    "InvoiceDraft",
    "InvoiceLineItem",
    "InvoiceTotals",
    "SignInvoiceRequest",
    "calculate_totals",
    # Submission models
    "StatusTone",
    "ZatcaSubmissionResult",
    "status_tone",
]
