"""Template filters for invoice and submission display."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict

from models.submission import normalize_status, status_tone


INVOICE_TYPE_LABELS = {
    "388": "Tax Invoice",
    "381": "Credit Note",
    "383": "Debit Note",
    "386": "Advance Payment",
}


def invoice_type_label(type_code: Any) -> str:
    return INVOICE_TYPE_LABELS.get(str(type_code or ""), "Invoice")


def invoice_category(type_code_name: Any) -> str:
    """Standard/simplified category from the 7-character subtype code."""
    name = str(type_code_name or "")
    if name.startswith("01"):
        return "Standard (B2B)"
    if name.startswith("02"):
        return "Simplified (B2C)"
    return "Unknown"


def status_badge(status: Any) -> Dict[str, str]:
    """Label and CSS tone for a status badge."""
    return {
        "label": normalize_status(status),
        "tone": status_tone(status).value,
    }


def format_amount(value: Any) -> str:
    """Two decimals with thousands separators; bad input renders as 0.00."""
    try:
        return f"{float(value or 0):,.2f}"
    except (TypeError, ValueError):
        return "0.00"


def format_date(value: Any, fmt: str = "%d %B %Y") -> str:
    """Format an ISO timestamp; unparseable values are returned unchanged."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return parsed.strftime(fmt)


def pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def register_filters(app) -> None:
    """Install the filters on a Flask app."""
    app.jinja_env.filters["invoice_type_label"] = invoice_type_label
    app.jinja_env.filters["invoice_category"] = invoice_category
    app.jinja_env.filters["status_badge"] = status_badge
    app.jinja_env.filters["amount"] = format_amount
    app.jinja_env.filters["date"] = format_date
    app.jinja_env.filters["pretty_json"] = pretty_json
