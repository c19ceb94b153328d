"""
Property onboarding routes (administrators only).

Handles:
- /onboarding - Tabbed forms (full onboarding, issue CSID, production CSID)
- /onboarding/onboard - Register property and generate CSR material
- /onboarding/issue-csid - Exchange OTP for a compliance CSID
- /onboarding/production - Exchange compliance CSID for a production CSID

A successful call renders the backend's JSON and clears the form; a failed
one re-renders the submitted values with an inline error.
"""

from flask import (
    Blueprint,
    current_app,
    render_template,
    request,
)

from core.exceptions import FormValidationError, ZatcaConsoleError
from logging_config import get_logger
from models.compliance import (
    DEFAULT_COUNTRY,
    DEFAULT_EGS_INVOICE_TYPE,
    DEFAULT_INDUSTRY,
    EGS_INVOICE_TYPES,
    IssueCsidRequest,
    OnboardEgsRequest,
    ProductionCsidRequest,
)
from services.tenant import UserRole, role_required


# Module logger
logger = get_logger(__name__)

onboarding_bp = Blueprint("onboarding", __name__)

TABS = ("onboard", "issue", "production")

# Initial form values per tab
FORM_DEFAULTS = {
    "onboard": {
        "countryName": DEFAULT_COUNTRY,
        "invoiceType": DEFAULT_EGS_INVOICE_TYPE,
        "industryBusinessCategory": DEFAULT_INDUSTRY,
    },
    "issue": {},
    "production": {},
}

# tab -> (request model, backend client method name)
_ACTIONS = {
    "onboard": (OnboardEgsRequest, "onboard"),
    "issue": (IssueCsidRequest, "issue_csid"),
    "production": (ProductionCsidRequest, "issue_production_csid"),
}


def _render(tab: str, values=None, errors=None, result=None, error=None, status=200):
    return render_template(
        "onboarding.html",
        tab=tab,
        values=values if values is not None else dict(FORM_DEFAULTS[tab]),
        errors=errors or {},
        result=result,
        error=error,
        invoice_types=EGS_INVOICE_TYPES,
    ), status


def _run(tab: str):
    """Validate the posted form for ``tab`` and make its backend call."""
    model, method_name = _ACTIONS[tab]

    try:
        payload = model.from_form(request.form)
    except FormValidationError as e:
        logger.debug(f"{tab} form rejected: {sorted(e.errors)}")
        return _render(tab, values=request.form.to_dict(), errors=e.errors, status=400)

    try:
        backend = current_app.config["BACKEND_CLIENT"]
        result = getattr(backend, method_name)(payload)
    except ZatcaConsoleError as e:
        logger.error(f"{tab} failed for {payload.common_name}: {e}")
        return _render(tab, values=request.form.to_dict(), error=e.message, status=502)

    logger.info(f"{tab} succeeded for {payload.common_name}")
    return _render(tab, result=result)


@onboarding_bp.route("/onboarding", methods=["GET"])
@role_required(UserRole.ADMIN)
def onboarding():
    """Display the onboarding forms."""
    tab = request.args.get("tab", "onboard")
    if tab not in TABS:
        tab = "onboard"
    return _render(tab)


@onboarding_bp.route("/onboarding/onboard", methods=["POST"])
@role_required(UserRole.ADMIN)
def onboard():
    return _run("onboard")


@onboarding_bp.route("/onboarding/issue-csid", methods=["POST"])
@role_required(UserRole.ADMIN)
def issue_csid():
    return _run("issue")


@onboarding_bp.route("/onboarding/production", methods=["POST"])
@role_required(UserRole.ADMIN)
def issue_production_csid():
    return _run("production")
