"""
Unit tests for form input helpers.
"""

import pytest

from modules.forms import REQUIRED_MESSAGE, get_flag, get_text, require_fields, sanitize_text


class TestSanitizeText:

    def test_markup_removed_entities_kept(self):
        assert sanitize_text("<b>Room</b> & Board") == "Room & Board"

    def test_script_tags_stripped(self):
        assert "<script>" not in sanitize_text("<script>alert(1)</script>Suite")

    def test_whitespace_trimmed(self):
        assert sanitize_text("  grand-hotel  ") == "grand-hotel"

    def test_truncated(self):
        assert sanitize_text("1234567", max_length=6) == "123456"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert sanitize_text(value) == ""


class TestFormReaders:

    def test_get_text_default_when_missing(self):
        assert get_text({}, "invoiceType", "1100") == "1100"

    def test_get_text_present_but_blank(self):
        assert get_text({"invoiceType": "  "}, "invoiceType", "1100") == ""

    @pytest.mark.parametrize("value,expected", [
        ("on", True), ("1", True), ("true", True), ("YES", True),
        ("off", False), ("0", False), ("", False),
    ])
    def test_get_flag(self, value, expected):
        assert get_flag({"production": value}, "production") is expected

    def test_get_flag_missing(self):
        assert get_flag({}, "production") is False

    def test_require_fields(self):
        errors = require_fields({"a": "x", "b": ""}, ("a", "b", "c"))
        assert errors == {"b": REQUIRED_MESSAGE, "c": REQUIRED_MESSAGE}
