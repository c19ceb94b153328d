"""
Submission and compliance result models.

Backend results are displayed verbatim; the only interpretation the console
does is mapping status strings to a badge tone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional


class StatusTone(Enum):
    """
    Badge colour for an invoice or submission status.

    SUCCESS: REPORTED, CLEARED
    DANGER:  FAILED, REJECTED
    WARNING: PENDING, WARNING
    NEUTRAL: anything else
    """

    SUCCESS = "success"
    DANGER = "danger"
    WARNING = "warning"
    NEUTRAL = "neutral"


_TONES = {
    "REPORTED": StatusTone.SUCCESS,
    "CLEARED": StatusTone.SUCCESS,
    "FAILED": StatusTone.DANGER,
    "REJECTED": StatusTone.DANGER,
    "PENDING": StatusTone.WARNING,
    "WARNING": StatusTone.WARNING,
}

UNKNOWN_STATUS = "UNKNOWN"


def normalize_status(status: Optional[str]) -> str:
    """Upper-case a status string; empty becomes UNKNOWN."""
    if not status:
        return UNKNOWN_STATUS
    return str(status).strip().upper() or UNKNOWN_STATUS


def status_tone(status: Optional[str]) -> StatusTone:
    return _TONES.get(normalize_status(status), StatusTone.NEUTRAL)


@dataclass
class ValidationResults:
    """validationResults block shared by compliance and submission responses."""

    status: str = ""
    info_messages: List[Any] = field(default_factory=list)
    warning_messages: List[Any] = field(default_factory=list)
    error_messages: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ValidationResults":
        if not isinstance(data, dict):
            data = {}
        return cls(
            status=str(data.get("status") or ""),
            info_messages=list(data.get("infoMessages") or []),
            warning_messages=list(data.get("warningMessages") or []),
            error_messages=list(data.get("errorMessages") or []),
        )


@dataclass
class ZatcaSubmissionResult:
    """
    Result of POST /compliance/submit.

    ``raw`` keeps the full backend JSON for the verbatim report.
    """

    submission_type: str
    """CLEARANCE (standard invoices) or REPORTING (simplified)."""

    zatca_status: str
    """CLEARED, REPORTED, REJECTED or WARNING."""

    message: str = ""
    validation_results: ValidationResults = field(default_factory=ValidationResults)
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def tone(self) -> StatusTone:
        return status_tone(self.zatca_status)

    @property
    def accepted(self) -> bool:
        return self.tone is StatusTone.SUCCESS

    @property
    def rejected(self) -> bool:
        return normalize_status(self.zatca_status) == "REJECTED"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ZatcaSubmissionResult":
        if not isinstance(data, dict):
            data = {}
        return cls(
            submission_type=str(data.get("submissionType") or ""),
            zatca_status=normalize_status(data.get("zatcaStatus")),
            message=str(data.get("message") or ""),
            validation_results=ValidationResults.from_dict(data.get("validationResults")),
            raw=dict(data),
        )


def serial_from_file_name(file_name: str) -> str:
    """Invoice serial number for a signed file ("INV-1_signed.xml" -> "INV-1")."""
    suffix = "_signed.xml"
    if file_name.endswith(suffix):
        return file_name[: -len(suffix)]
    return file_name
