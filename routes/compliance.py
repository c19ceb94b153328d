"""
Compliance routes.

Handles:
- /compliance - Verification and submission forms
- /compliance/check - Validate a signed invoice against ZATCA rules
- /compliance/submit - Clearance/reporting submission by serial number
"""

from flask import (
    Blueprint,
    current_app,
    render_template,
    request,
)

from core.exceptions import FormValidationError, ZatcaConsoleError
from logging_config import get_logger
from models.compliance import CheckComplianceRequest, SubmitZatcaRequest
from models.submission import ZatcaSubmissionResult
from services.tenant import get_context, role_required


# Module logger
logger = get_logger(__name__)

compliance_bp = Blueprint("compliance", __name__)

TABS = ("check", "submit")


def _defaults():
    """Hotel users check their own property by default."""
    ctx = get_context()
    return {"commonName": ctx.active_tenant.slug if ctx.active_tenant else ""}


def _render(tab, values=None, errors=None, result=None, submission=None,
            error=None, status=200):
    return render_template(
        "compliance.html",
        tab=tab,
        values=values if values is not None else _defaults(),
        errors=errors or {},
        result=result,
        submission=submission,
        error=error,
    ), status


@compliance_bp.route("/compliance", methods=["GET"])
@role_required()
def compliance():
    """Display the compliance forms."""
    tab = request.args.get("tab", "check")
    if tab not in TABS:
        tab = "check"
    return _render(tab)


@compliance_bp.route("/compliance/check", methods=["POST"])
@role_required()
def check():
    """Run a compliance check and show the metadata report."""
    try:
        check_request = CheckComplianceRequest.from_form(request.form)
    except FormValidationError as e:
        return _render("check", values=request.form.to_dict(), errors=e.errors, status=400)

    try:
        result = current_app.config["BACKEND_CLIENT"].check_compliance(check_request)
    except ZatcaConsoleError as e:
        logger.error(f"Compliance check failed for {check_request.invoice_serial_number}: {e}")
        return _render("check", values=request.form.to_dict(), error=e.message, status=502)

    return _render("check", values=request.form.to_dict(), result=result)


@compliance_bp.route("/compliance/submit", methods=["POST"])
@role_required()
def submit():
    """Submit an already signed invoice by serial number."""
    try:
        submit_request = SubmitZatcaRequest.from_form(request.form)
    except FormValidationError as e:
        return _render("submit", values=request.form.to_dict(), errors=e.errors, status=400)

    try:
        data = current_app.config["BACKEND_CLIENT"].submit(submit_request)
    except ZatcaConsoleError as e:
        logger.error(f"Submission failed for {submit_request.invoice_serial_number}: {e}")
        return _render("submit", values=request.form.to_dict(), error=e.message, status=502)

    return _render(
        "submit",
        values=request.form.to_dict(),
        submission=ZatcaSubmissionResult.from_dict(data),
    )
