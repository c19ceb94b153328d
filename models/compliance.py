"""
Compliance request models.

These mirror the backend's compliance DTOs. Each request is built from a
posted form with ``from_form()``, which sanitizes every value and raises
FormValidationError when a required field is empty, so an incomplete form
never produces a backend call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any, Mapping

from core.exceptions import FormValidationError
from modules.forms import get_flag, get_text, require_fields


# Onboarding defaults
DEFAULT_COUNTRY = "SA"
DEFAULT_EGS_INVOICE_TYPE = "1100"
DEFAULT_INDUSTRY = "Hotels and Accommodation"

EGS_INVOICE_TYPES = {
    "1000": "1000 - Standard Invoice",
    "1100": "1100 - Simplified Invoice",
}

OTP_LENGTH = 6


@dataclass
class OnboardEgsRequest:
    """
    Full onboarding of a property.

    The backend generates a key pair and CSR for these subject fields.
    """

    common_name: str
    """Hotel name; becomes the property slug."""

    serial_number: str
    """EGS serial in the "1-TST|2-TST|3-ABCD1234" form."""

    organization_identifier: str
    """VAT number of the organization."""

    organization_unit_name: str
    organization_name: str
    location_address: str

    country_name: str = DEFAULT_COUNTRY
    invoice_type: str = DEFAULT_EGS_INVOICE_TYPE
    industry_business_category: str = DEFAULT_INDUSTRY
    production: bool = False

    REQUIRED_FIELDS = (
        "commonName",
        "serialNumber",
        "organizationName",
        "organizationUnitName",
        "organizationIdentifier",
        "countryName",
        "invoiceType",
        "industryBusinessCategory",
        "locationAddress",
    )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "commonName": self.common_name,
            "serialNumber": self.serial_number,
            "organizationIdentifier": self.organization_identifier,
            "organizationUnitName": self.organization_unit_name,
            "organizationName": self.organization_name,
            "countryName": self.country_name,
            "invoiceType": self.invoice_type,
            "locationAddress": self.location_address,
            "industryBusinessCategory": self.industry_business_category,
            "production": self.production,
        }

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "OnboardEgsRequest":
        values = {
            "commonName": get_text(form, "commonName"),
            "serialNumber": get_text(form, "serialNumber"),
            "organizationIdentifier": get_text(form, "organizationIdentifier"),
            "organizationUnitName": get_text(form, "organizationUnitName"),
            "organizationName": get_text(form, "organizationName"),
            "countryName": DEFAULT_COUNTRY,
            "invoiceType": get_text(form, "invoiceType", DEFAULT_EGS_INVOICE_TYPE),
            "locationAddress": get_text(form, "locationAddress"),
            "industryBusinessCategory": get_text(
                form, "industryBusinessCategory", DEFAULT_INDUSTRY
            ),
        }
        errors = require_fields(values, cls.REQUIRED_FIELDS)
        if values["invoiceType"] and values["invoiceType"] not in EGS_INVOICE_TYPES:
            errors["invoiceType"] = "Unsupported invoice type"
        if errors:
            raise FormValidationError(errors)

        return cls(
            common_name=values["commonName"],
            serial_number=values["serialNumber"],
            organization_identifier=values["organizationIdentifier"],
            organization_unit_name=values["organizationUnitName"],
            organization_name=values["organizationName"],
            location_address=values["locationAddress"],
            country_name=values["countryName"],
            invoice_type=values["invoiceType"],
            industry_business_category=values["industryBusinessCategory"],
            production=get_flag(form, "production"),
        )


@dataclass
class IssueCsidRequest:
    """Exchange of a Fatoora-portal OTP for a compliance CSID."""

    common_name: str
    otp: str
    production: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "commonName": self.common_name,
            "otp": self.otp,
            "production": self.production,
        }

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "IssueCsidRequest":
        values = {
            "commonName": get_text(form, "commonName"),
            "otp": get_text(form, "otp", max_length=OTP_LENGTH),
        }
        errors = require_fields(values, ("commonName", "otp"))
        if errors:
            raise FormValidationError(errors)
        return cls(
            common_name=values["commonName"],
            otp=values["otp"],
            production=get_flag(form, "production"),
        )


@dataclass
class ProductionCsidRequest:
    """Exchange of a property's compliance CSID for a production CSID."""

    common_name: str
    production: bool = True

    def to_payload(self) -> Dict[str, Any]:
        return {"commonName": self.common_name, "production": self.production}

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "ProductionCsidRequest":
        common_name = get_text(form, "commonName")
        errors = require_fields({"commonName": common_name}, ("commonName",))
        if errors:
            raise FormValidationError(errors)
        return cls(common_name=common_name)


@dataclass
class CheckComplianceRequest:
    """Compliance check of one signed invoice."""

    common_name: str
    invoice_serial_number: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "commonName": self.common_name,
            "invoiceSerialNumber": self.invoice_serial_number,
        }

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "CheckComplianceRequest":
        values = {
            "commonName": get_text(form, "commonName"),
            "invoiceSerialNumber": get_text(form, "invoiceSerialNumber"),
        }
        errors = require_fields(values, ("commonName", "invoiceSerialNumber"))
        if errors:
            raise FormValidationError(errors)
        return cls(
            common_name=values["commonName"],
            invoice_serial_number=values["invoiceSerialNumber"],
        )


@dataclass
class SubmitZatcaRequest:
    """Clearance (standard) or reporting (simplified) submission."""

    common_name: str
    invoice_serial_number: str
    production: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "commonName": self.common_name,
            "invoiceSerialNumber": self.invoice_serial_number,
            "production": self.production,
        }

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "SubmitZatcaRequest":
        values = {
            "commonName": get_text(form, "commonName"),
            "invoiceSerialNumber": get_text(form, "invoiceSerialNumber"),
        }
        errors = require_fields(values, ("commonName", "invoiceSerialNumber"))
        if errors:
            raise FormValidationError(errors)
        return cls(
            common_name=values["commonName"],
            invoice_serial_number=values["invoiceSerialNumber"],
            production=get_flag(form, "production"),
        )
