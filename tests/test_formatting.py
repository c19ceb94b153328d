"""
Unit tests for template filters and QR rendering.
"""

import pytest

from modules.formatting import (
    format_amount,
    format_date,
    invoice_category,
    invoice_type_label,
    pretty_json,
    status_badge,
)
from modules.qr import render_qr_svg


class TestLabels:

    @pytest.mark.parametrize("code,label", [
        ("388", "Tax Invoice"),
        ("381", "Credit Note"),
        ("383", "Debit Note"),
        ("386", "Advance Payment"),
        ("999", "Invoice"),
        (None, "Invoice"),
    ])
    def test_invoice_type_label(self, code, label):
        assert invoice_type_label(code) == label

    @pytest.mark.parametrize("name,category", [
        ("0111010", "Standard (B2B)"),
        ("0211010", "Simplified (B2C)"),
        ("", "Unknown"),
        (None, "Unknown"),
    ])
    def test_invoice_category(self, name, category):
        assert invoice_category(name) == category

    def test_status_badge(self):
        assert status_badge("cleared") == {"label": "CLEARED", "tone": "success"}
        assert status_badge("PENDING") == {"label": "PENDING", "tone": "warning"}
        assert status_badge(None) == {"label": "UNKNOWN", "tone": "neutral"}


class TestFormatting:

    def test_amount(self):
        assert format_amount(1234.5) == "1,234.50"
        assert format_amount(None) == "0.00"
        assert format_amount("abc") == "0.00"

    def test_date(self):
        assert format_date("2025-01-15T10:30:00Z") == "15 January 2025"
        assert format_date("not a date") == "not a date"
        assert format_date(None) == ""

    def test_pretty_json_keeps_arabic(self):
        assert "فندق" in pretty_json({"name": "فندق"})


class TestQr:

    def test_svg_rendered(self):
        svg = render_qr_svg("AQ1HcmFuZCBIb3RlbA==")
        assert svg is not None
        assert "<svg" in str(svg)

    @pytest.mark.parametrize("payload", [None, ""])
    def test_no_payload(self, payload):
        assert render_qr_svg(payload) is None
