"""
API routes (JSON endpoints).

Handles:
- /health - Health check with the configured backend URL
- /api/egs - Registered properties (for scripts)
- /api/totals - Line amounts and invoice totals for posted line items
"""

from flask import (
    Blueprint,
    current_app,
    request,
)

from core.exceptions import ZatcaConsoleError
from logging_config import get_logger
from models.invoice import InvoiceLineItem, calculate_totals, format_percent
from services.tenant import get_context


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    backend = current_app.config.get("BACKEND_CLIENT")
    return {
        "status": "ok",
        "backend": backend.base_url if backend else None,
    }


@api_bp.route("/api/egs", methods=["GET"])
def list_egs():
    """Registered properties as JSON."""
    if not get_context().is_authenticated:
        return {"error": "Not logged in"}, 401

    try:
        properties = current_app.config["BACKEND_CLIENT"].list_egs()
    except ZatcaConsoleError as e:
        logger.error(f"Property list failed: {e}")
        return {"error": e.message}, 502

    return {"items": [item.to_dict() for item in properties]}


@api_bp.route("/api/totals", methods=["POST"])
def totals():
    """
    Compute totals for ``{"lineItems": [...]}``.

    Same arithmetic and default VAT rate as the invoice form. Values that
    do not parse, or are too large, count as zero, so this never fails on
    partially typed input.
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return {"error": "Body must be a JSON object"}, 400

    raw_items = data.get("lineItems") or []
    if not isinstance(raw_items, list):
        return {"error": "lineItems must be a list"}, 400

    default_vat_percent = format_percent(current_app.config["DEFAULT_VAT_PERCENT"])
    items = [
        InvoiceLineItem.from_dict(
            raw, line_id=str(position), default_vat_percent=default_vat_percent
        )
        for position, raw in enumerate(raw_items, start=1)
        if isinstance(raw, dict)
    ]

    lines = []
    for item in items:
        payload = item.to_payload()
        lines.append({
            "lineId": item.line_id,
            "taxExclusiveAmount": payload["taxExclusiveAmount"],
            "vatAmount": payload["vatAmount"],
        })

    return {
        "lineItems": lines,
        "totals": calculate_totals(items).to_payload(),
    }
