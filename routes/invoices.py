"""
Invoice creation routes.

Handles:
- /invoices (GET) - Empty invoice form
- /invoices (POST) - Form actions: add_line, remove_line-N, select_property, sign
- /invoices/submit - Hand a signed invoice to ZATCA (clearance or reporting)

Flow:
    fill form -> sign -> view QR/XML -> submit to ZATCA -> view status

Line items are edited server-side: every action posts the whole form, the
draft is rebuilt from it, changed, and re-rendered. Only ``sign`` and the
submit route call the backend.
"""

from flask import (
    Blueprint,
    current_app,
    render_template,
    request,
)

from core.exceptions import FormValidationError, ZatcaConsoleError
from logging_config import get_logger
from models.compliance import SubmitZatcaRequest
from models.egs import find_by_slug
from models.invoice import (
    CUSTOMER_TYPES,
    INVOICE_TYPE_CODES,
    TAX_CATEGORIES,
    InvoiceDraft,
)
from models.submission import ZatcaSubmissionResult, serial_from_file_name
from modules.qr import render_qr_svg
from services.properties import fetch_properties
from services.tenant import get_context, role_required


# Module logger
logger = get_logger(__name__)

invoices_bp = Blueprint("invoices", __name__)

REMOVE_LINE_PREFIX = "remove_line-"


def _properties_for(ctx):
    """
    Properties the user may invoice for.

    Hotel users are limited to their own property.
    """
    properties, error = fetch_properties(current_app.config["BACKEND_CLIENT"])
    if ctx.is_hotel and ctx.active_tenant:
        own = find_by_slug(properties, ctx.active_tenant.slug)
        properties = [own or ctx.active_tenant]
    return properties, error


def _render(draft, properties, properties_error=None, errors=None,
            sign_result=None, error=None, status=200):
    qr_svg = render_qr_svg(sign_result.get("qrCode")) if sign_result else None
    serial = serial_from_file_name(sign_result.get("fileName", "")) if sign_result else ""

    return render_template(
        "invoices/new.html",
        draft=draft,
        totals=draft.totals(),
        properties=properties,
        properties_error=properties_error,
        errors=errors or {},
        error=error,
        sign_result=sign_result,
        qr_svg=qr_svg,
        invoice_serial=serial,
        invoice_type_codes=INVOICE_TYPE_CODES,
        customer_types=CUSTOMER_TYPES,
        tax_categories=TAX_CATEGORIES,
    ), status


@invoices_bp.route("/invoices", methods=["GET"])
@role_required()
def new_invoice():
    """Display an empty invoice form (hotel users get their property preselected)."""
    ctx = get_context()
    properties, properties_error = _properties_for(ctx)

    draft = InvoiceDraft.new(
        default_vat_percent=current_app.config["DEFAULT_VAT_PERCENT"],
        common_name=ctx.active_tenant.slug if ctx.active_tenant else "",
    )
    draft.apply_property(find_by_slug(properties, draft.common_name))

    return _render(draft, properties, properties_error)


@invoices_bp.route("/invoices", methods=["POST"])
@role_required()
def invoice_action():
    """
    Apply one form action to the posted draft.

    sign: validate, compute line amounts and totals, call POST /invoice/sign
    """
    ctx = get_context()
    properties, properties_error = _properties_for(ctx)

    draft = InvoiceDraft.from_form(
        request.form,
        default_vat_percent=current_app.config["DEFAULT_VAT_PERCENT"],
    )
    if ctx.is_hotel and ctx.active_tenant:
        draft.common_name = ctx.active_tenant.slug
    draft.apply_property(find_by_slug(properties, draft.common_name))

    action = request.form.get("action", "sign")

    if action == "add_line":
        draft.add_line()
        return _render(draft, properties, properties_error)

    if action.startswith(REMOVE_LINE_PREFIX):
        try:
            draft.remove_line(int(action[len(REMOVE_LINE_PREFIX):]))
        except ValueError:
            logger.warning(f"Invalid remove action: {action!r}")
        return _render(draft, properties, properties_error)

    if action != "sign":
        # select_property and anything unknown just re-render
        return _render(draft, properties, properties_error)

    try:
        sign_request = draft.to_request(currency=current_app.config["DEFAULT_CURRENCY"])
    except FormValidationError as e:
        return _render(draft, properties, properties_error,
                       errors=e.errors, error=e.message, status=400)

    try:
        result = current_app.config["BACKEND_CLIENT"].sign_invoice(sign_request)
    except ZatcaConsoleError as e:
        logger.error(f"Invoice signing failed for {draft.common_name}: {e}")
        return _render(draft, properties, properties_error, error=e.message, status=502)

    if not isinstance(result, dict):
        logger.error(f"Unexpected sign response for {draft.common_name}: {type(result).__name__}")
        return _render(draft, properties, properties_error,
                       error="Unexpected sign response from backend", status=502)

    logger.info(f"Invoice signed: {result.get('fileName', '?')}")
    return _render(draft, properties, properties_error, sign_result=result)


@invoices_bp.route("/invoices/submit", methods=["POST"])
@role_required()
def submit_invoice():
    """
    Submit a signed invoice to ZATCA.

    The backend picks clearance (standard) or reporting (simplified) from the
    stored invoice. Always targets the simulation environment from this screen.
    """
    ctx = get_context()
    file_name = request.form.get("fileName", "")

    try:
        submit_request = SubmitZatcaRequest.from_form(request.form)
    except FormValidationError as e:
        return render_template(
            "invoices/submitted.html", file_name=file_name, result=None, error=e.message
        ), 400

    submit_request.production = False
    if ctx.is_hotel and ctx.active_tenant and submit_request.common_name != ctx.active_tenant.slug:
        logger.warning(f"Hotel {ctx.active_tenant.slug} tried to submit for {submit_request.common_name}")
        return render_template(
            "invoices/submitted.html", file_name=file_name, result=None,
            error="You can only submit invoices for your own property.",
        ), 403

    try:
        data = current_app.config["BACKEND_CLIENT"].submit(submit_request)
    except ZatcaConsoleError as e:
        logger.error(f"Submission of {submit_request.invoice_serial_number} failed: {e}")
        return render_template(
            "invoices/submitted.html", file_name=file_name, result=None, error=e.message
        ), 502

    result = ZatcaSubmissionResult.from_dict(data)
    logger.info(
        f"{submit_request.invoice_serial_number}: {result.submission_type} {result.zatca_status}"
    )
    return render_template(
        "invoices/submitted.html", file_name=file_name, result=result, error=None
    )
