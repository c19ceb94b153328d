"""
Invoice draft and sign-request models.

An InvoiceDraft is the editable state of the invoice creation form. It is
rebuilt from the posted form on every request (line items are added and
removed server-side), validated, and turned into a SignInvoiceRequest for
POST /invoice/sign. The draft is never stored.

Money arithmetic uses Decimal and rounds half-up to two places:

    taxExclusiveAmount = round2(quantity * unitPrice)
    vatAmount          = round2(quantity * unitPrice * vatPercent / 100)
    lineExtensionTotal = round2(sum(quantity * unitPrice))
    vatTotal           = round2(sum(quantity * unitPrice * vatPercent / 100))
    taxInclusiveTotal  = round2(sum of both unrounded sums)

Values that do not parse as numbers, or whose magnitude exceeds MAX_NUMBER,
count as zero; validate() reports the latter as too large.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Dict, Any, Iterable, List, Mapping, Optional

from core.exceptions import FormValidationError
from modules.forms import REQUIRED_MESSAGE, get_text
from .egs import EgsListItem


CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# Largest accepted quantity, price or percentage
MAX_NUMBER = Decimal("1000000000000")
TOO_LARGE_MESSAGE = "Value too large"

# Enough digits for MAX_NUMBER * MAX_NUMBER * MAX_NUMBER summed over many lines
ARITHMETIC_PRECISION = 60

# Invoice type codes (UNTDID 1001)
TAX_INVOICE = "388"
INVOICE_TYPE_CODES = {
    "388": "Tax Invoice",
    "381": "Credit Note",
    "383": "Debit Note",
}

# Transaction subtype names: standard (B2B) vs simplified (B2C)
STANDARD_TYPE_CODE_NAME = "0111010"
SIMPLIFIED_TYPE_CODE_NAME = "0211010"

CUSTOMER_TYPES = {
    "B2C": "Individual (B2C)",
    "B2B": "Company (B2B)",
}

TAX_CATEGORIES = ("S", "Z", "E", "O")

DEFAULT_PAYMENT_MEANS_CODE = "10"  # Cash
DEFAULT_SUPPLIER_NAME = "Supplier Name LTD"
DEFAULT_SUPPLIER_VAT = "300000000000003"

_LINE_FIELD = re.compile(r"^lineItems-(\d+)-(\w+)$")


def round2(value: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    with localcontext() as ctx:
        ctx.prec = ARITHMETIC_PRECISION
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(raw: Any) -> Decimal:
    """Parse a number from form input; unparseable or oversized input is zero."""
    if raw is None or raw == "":
        return Decimal("0")
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not value.is_finite() or abs(value) > MAX_NUMBER:
        return Decimal("0")
    return value


def is_too_large(raw: Any) -> bool:
    """True when ``raw`` parses as a finite number beyond MAX_NUMBER."""
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return False
    return value.is_finite() and abs(value) > MAX_NUMBER


def _money(value: Decimal) -> float:
    return float(round2(value))


def _number(raw: str) -> float:
    value = to_decimal(raw)
    return int(value) if value == value.to_integral_value() else float(value)


# =============================================================================
# LINE ITEMS
# =============================================================================

@dataclass
class InvoiceLineItem:
    """
    One line of the invoice as typed into the form.

    Numeric fields are kept as the raw strings the user entered so that the
    form can be re-rendered exactly; the ``*_value`` properties parse them.
    """

    line_id: str
    description: str = ""
    quantity: str = "1"
    unit_price: str = "0"
    vat_percent: str = "15"
    tax_category: str = "S"
    unit_code: str = "PCE"
    type: str = "Service"

    @property
    def quantity_value(self) -> Decimal:
        return to_decimal(self.quantity)

    @property
    def unit_price_value(self) -> Decimal:
        return to_decimal(self.unit_price)

    @property
    def vat_percent_value(self) -> Decimal:
        return to_decimal(self.vat_percent)

    @property
    def gross_amount(self) -> Decimal:
        """quantity * unitPrice, unrounded."""
        return self.quantity_value * self.unit_price_value

    @property
    def vat_amount(self) -> Decimal:
        """VAT on this line, unrounded."""
        return self.gross_amount * self.vat_percent_value / HUNDRED

    def to_payload(self) -> Dict[str, Any]:
        return {
            "lineId": self.line_id,
            "type": self.type,
            "description": self.description,
            "quantity": _number(self.quantity),
            "unitCode": self.unit_code,
            "unitPrice": _number(self.unit_price),
            "taxExclusiveAmount": _money(self.gross_amount),
            "vatPercent": _number(self.vat_percent),
            "vatAmount": _money(self.vat_amount),
            "taxCategory": self.tax_category,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], line_id: str,
                  default_vat_percent: str = "15") -> "InvoiceLineItem":
        """
        Create from a camelCase mapping (JSON body or grouped form fields).

        A line without ``vatPercent`` gets ``default_vat_percent``.
        """
        defaults = cls(line_id=line_id, vat_percent=default_vat_percent)
        return cls(
            line_id=line_id,
            description=get_text(data, "description"),
            quantity=get_text(data, "quantity", defaults.quantity, max_length=32),
            unit_price=get_text(data, "unitPrice", defaults.unit_price, max_length=32),
            vat_percent=get_text(data, "vatPercent", defaults.vat_percent, max_length=32),
            tax_category=get_text(data, "taxCategory", defaults.tax_category, max_length=4),
            unit_code=get_text(data, "unitCode", defaults.unit_code, max_length=16),
            type=get_text(data, "type", defaults.type, max_length=32),
        )


@dataclass
class InvoiceTotals:
    """Document-level monetary totals, already rounded."""

    line_extension_total: Decimal
    tax_exclusive_total: Decimal
    vat_total: Decimal
    tax_inclusive_total: Decimal
    payable_amount: Decimal

    def to_payload(self) -> Dict[str, Any]:
        return {
            "lineExtensionTotal": float(self.line_extension_total),
            "taxExclusiveTotal": float(self.tax_exclusive_total),
            "vatTotal": float(self.vat_total),
            "taxInclusiveTotal": float(self.tax_inclusive_total),
            "payableAmount": float(self.payable_amount),
        }


def calculate_totals(line_items: Iterable[InvoiceLineItem]) -> InvoiceTotals:
    """
    Compute invoice totals from line items.

    Sums are taken over unrounded line amounts and rounded once at the end.
    """
    items = list(line_items)
    line_extension = sum((item.gross_amount for item in items), Decimal("0"))
    vat = sum((item.vat_amount for item in items), Decimal("0"))
    inclusive = line_extension + vat

    return InvoiceTotals(
        line_extension_total=round2(line_extension),
        tax_exclusive_total=round2(line_extension),
        vat_total=round2(vat),
        tax_inclusive_total=round2(inclusive),
        payable_amount=round2(inclusive),
    )


# =============================================================================
# SIGN REQUEST
# =============================================================================

@dataclass
class Address:
    street: str = "Main St"
    city: str = "Riyadh"
    country: str = "SA"
    building_number: str = ""
    district: str = ""
    postal_code: str = ""

    def to_payload(self) -> Dict[str, Any]:
        payload = {"street": self.street, "city": self.city, "country": self.country}
        if self.building_number:
            payload["buildingNumber"] = self.building_number
        if self.district:
            payload["district"] = self.district
        if self.postal_code:
            payload["postalCode"] = self.postal_code
        return payload


@dataclass
class EgsInfo:
    """The signing unit, as sent in the ``egs`` block."""

    common_name: str
    vat_number: str
    country_code: str = "SA"
    invoice_type: str = "1100"
    production: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "commonName": self.common_name,
            "vatNumber": self.vat_number,
            "countryCode": self.country_code,
            "invoiceType": self.invoice_type,
            "production": self.production,
        }


@dataclass
class SignInvoiceRequest:
    """Body of POST /invoice/sign."""

    egs: EgsInfo
    currency: str
    invoice_type_code: str
    invoice_type_code_name: str
    supplier_registration_name: str
    supplier_vat_number: str
    customer_type: str
    customer_name: str
    line_items: List[InvoiceLineItem]
    totals: InvoiceTotals
    billing_reference_id: str = ""
    payment_means_code: str = DEFAULT_PAYMENT_MEANS_CODE
    supplier_address: Address = field(default_factory=Address)

    def to_payload(self) -> Dict[str, Any]:
        invoice = {
            "currency": self.currency,
            "invoiceTypeCode": self.invoice_type_code,
            "invoiceTypeCodeName": self.invoice_type_code_name,
            "paymentMeansCode": self.payment_means_code,
        }
        if self.billing_reference_id:
            invoice["billingReferenceId"] = self.billing_reference_id

        customer = {"type": self.customer_type}
        if self.customer_name:
            customer["name"] = self.customer_name

        return {
            "egs": self.egs.to_payload(),
            "invoice": invoice,
            "supplier": {
                "registrationName": self.supplier_registration_name,
                "vatNumber": self.supplier_vat_number,
                "address": self.supplier_address.to_payload(),
            },
            "customer": customer,
            "lineItems": [item.to_payload() for item in self.line_items],
            "totals": self.totals.to_payload(),
        }


# =============================================================================
# DRAFT (FORM STATE)
# =============================================================================

@dataclass
class InvoiceDraft:
    """
    Editable invoice form state.

    Lifecycle (one HTTP request each):
        1. Built from the posted form with from_form()
        2. Optionally edited (add_line / remove_line) and re-rendered
        3. apply_property() copies VAT/name from the selected property
        4. validate(), then to_request() for signing
    """

    common_name: str = ""
    """Selected property slug."""

    egs_vat_number: str = ""
    """VAT number of the selected property."""

    invoice_type_code: str = TAX_INVOICE
    billing_reference_id: str = ""

    supplier_registration_name: str = DEFAULT_SUPPLIER_NAME
    supplier_vat_number: str = DEFAULT_SUPPLIER_VAT

    customer_type: str = "B2C"
    customer_name: str = ""

    prefilled_for: str = ""
    """Slug whose values were last copied into the supplier block."""

    default_vat_percent: str = "15"
    line_items: List[InvoiceLineItem] = field(default_factory=list)

    @classmethod
    def new(cls, default_vat_percent: float = 15.0,
            common_name: str = "") -> "InvoiceDraft":
        """A fresh draft with one empty service line."""
        draft = cls(
            common_name=common_name,
            default_vat_percent=format_percent(default_vat_percent),
        )
        draft.add_line()
        return draft

    @classmethod
    def from_form(cls, form: Mapping[str, str],
                  default_vat_percent: float = 15.0) -> "InvoiceDraft":
        """Rebuild the draft from a posted invoice form."""
        invoice_type_code = get_text(form, "invoiceTypeCode", TAX_INVOICE, max_length=3)
        if invoice_type_code not in INVOICE_TYPE_CODES:
            invoice_type_code = TAX_INVOICE

        customer_type = get_text(form, "customerType", "B2C", max_length=3)
        if customer_type not in CUSTOMER_TYPES:
            customer_type = "B2C"

        draft = cls(
            common_name=get_text(form, "commonName"),
            egs_vat_number=get_text(form, "egsVatNumber", max_length=32),
            invoice_type_code=invoice_type_code,
            billing_reference_id=get_text(form, "billingReferenceId"),
            supplier_registration_name=get_text(form, "supplierRegistrationName"),
            supplier_vat_number=get_text(form, "supplierVatNumber", max_length=32),
            customer_type=customer_type,
            customer_name=get_text(form, "customerName"),
            prefilled_for=get_text(form, "prefilledFor"),
            default_vat_percent=format_percent(default_vat_percent),
        )

        grouped: Dict[int, Dict[str, str]] = {}
        for key in form.keys():
            match = _LINE_FIELD.match(key)
            if match:
                index, name = int(match.group(1)), match.group(2)
                grouped.setdefault(index, {})[name] = form.get(key)

        for position, index in enumerate(sorted(grouped), start=1):
            draft.line_items.append(
                InvoiceLineItem.from_dict(
                    grouped[index],
                    line_id=str(position),
                    default_vat_percent=draft.default_vat_percent,
                )
            )

        return draft

    # ---------------------------------------------------------------------
    # Editing
    # ---------------------------------------------------------------------

    def add_line(self) -> InvoiceLineItem:
        """Append a default service line."""
        item = InvoiceLineItem(
            line_id=str(len(self.line_items) + 1),
            vat_percent=self.default_vat_percent,
        )
        self.line_items.append(item)
        return item

    def remove_line(self, index: int) -> None:
        """Remove the line at ``index`` (0-based) and renumber the rest."""
        if 0 <= index < len(self.line_items):
            del self.line_items[index]
        for position, item in enumerate(self.line_items, start=1):
            item.line_id = str(position)

    def apply_property(self, egs: Optional[EgsListItem]) -> None:
        """
        Copy identity fields from the selected property.

        The EGS VAT number always follows the selection. Supplier name and
        VAT are overwritten only when the selection changed since the last
        prefill, so manual edits survive re-renders.
        """
        if egs is None:
            self.egs_vat_number = ""
            return

        self.egs_vat_number = egs.vat_number
        if self.prefilled_for != egs.slug:
            self.supplier_vat_number = egs.vat_number
            self.supplier_registration_name = egs.organization_name
            self.prefilled_for = egs.slug

    # ---------------------------------------------------------------------
    # Derived values
    # ---------------------------------------------------------------------

    @property
    def invoice_type_code_name(self) -> str:
        if self.customer_type == "B2B":
            return STANDARD_TYPE_CODE_NAME
        return SIMPLIFIED_TYPE_CODE_NAME

    @property
    def requires_billing_reference(self) -> bool:
        """Credit and debit notes must reference the original invoice."""
        return self.invoice_type_code != TAX_INVOICE

    def totals(self) -> InvoiceTotals:
        return calculate_totals(self.line_items)

    # ---------------------------------------------------------------------
    # Validation & conversion
    # ---------------------------------------------------------------------

    def validate(self) -> Dict[str, str]:
        """
        Check required fields.

        Returns:
            Mapping of field name to message; empty when the draft can be signed
        """
        errors: Dict[str, str] = {}

        if not self.common_name:
            errors["commonName"] = REQUIRED_MESSAGE
        if not self.supplier_registration_name:
            errors["supplierRegistrationName"] = REQUIRED_MESSAGE
        if not self.supplier_vat_number:
            errors["supplierVatNumber"] = REQUIRED_MESSAGE
        if self.requires_billing_reference and not self.billing_reference_id:
            errors["billingReferenceId"] = REQUIRED_MESSAGE

        if not self.line_items:
            errors["lineItems"] = "Add at least one line item"

        for index, item in enumerate(self.line_items):
            prefix = f"lineItems-{index}"
            if not item.description:
                errors[f"{prefix}-description"] = REQUIRED_MESSAGE
            if not item.quantity:
                errors[f"{prefix}-quantity"] = REQUIRED_MESSAGE
            elif item.quantity_value <= 0:
                errors[f"{prefix}-quantity"] = "Must be greater than zero"
            if not item.unit_price:
                errors[f"{prefix}-unitPrice"] = REQUIRED_MESSAGE
            elif item.unit_price_value < 0:
                errors[f"{prefix}-unitPrice"] = "Must not be negative"
            if item.vat_percent_value < 0:
                errors[f"{prefix}-vatPercent"] = "Must not be negative"

            # Oversized values parse as zero, so this replaces any message above
            for name, raw in (("quantity", item.quantity),
                              ("unitPrice", item.unit_price),
                              ("vatPercent", item.vat_percent)):
                if is_too_large(raw):
                    errors[f"{prefix}-{name}"] = TOO_LARGE_MESSAGE

        return errors

    def to_request(self, currency: str = "SAR") -> SignInvoiceRequest:
        """
        Build the sign request.

        Raises:
            FormValidationError: If validate() reports any error
        """
        errors = self.validate()
        if errors:
            raise FormValidationError(errors)

        return SignInvoiceRequest(
            egs=EgsInfo(common_name=self.common_name, vat_number=self.egs_vat_number),
            currency=currency,
            invoice_type_code=self.invoice_type_code,
            invoice_type_code_name=self.invoice_type_code_name,
            billing_reference_id=(
                self.billing_reference_id if self.requires_billing_reference else ""
            ),
            supplier_registration_name=self.supplier_registration_name,
            supplier_vat_number=self.supplier_vat_number,
            customer_type=self.customer_type,
            customer_name=self.customer_name,
            line_items=list(self.line_items),
            totals=self.totals(),
        )


def format_percent(value: float) -> str:
    """Render a configured percentage the way it is typed (15.0 -> "15")."""
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)
