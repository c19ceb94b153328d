"""
Form input helpers shared by all screens.

Every text value posted by a browser goes through ``sanitize_text`` before
it reaches a request model, and required fields are checked with
``require_fields`` so that an empty form never reaches the backend.
"""

from __future__ import annotations

import html
from typing import Dict, Iterable, Mapping, Optional

import bleach


REQUIRED_MESSAGE = "Field required"
MAX_FIELD_LENGTH = 500

TRUTHY_VALUES = {"1", "true", "on", "yes"}


def sanitize_text(text: Optional[str], max_length: Optional[int] = MAX_FIELD_LENGTH) -> str:
    """
    Sanitize user input text to prevent XSS and injection attacks.

    Args:
        text: Raw input text
        max_length: Optional maximum length to enforce

    Returns:
        Sanitized text safe for forwarding and display
    """
    if not text:
        return ""

    text = str(text).strip()
    # Markup is stripped; entities are decoded again since templates escape
    # on output and the backend expects plain text.
    text = html.unescape(bleach.clean(text, tags=[], strip=True))

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def get_text(form: Mapping[str, str], name: str, default: str = "",
             max_length: Optional[int] = MAX_FIELD_LENGTH) -> str:
    """Read and sanitize one field; missing fields yield ``default``."""
    value = form.get(name)
    if value is None:
        return default
    return sanitize_text(value, max_length=max_length)


def get_flag(form: Mapping[str, str], name: str) -> bool:
    """Read a checkbox. Unchecked boxes are absent from the form."""
    value = form.get(name)
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_VALUES


def require_fields(values: Mapping[str, str], names: Iterable[str]) -> Dict[str, str]:
    """
    Check that every named value is non-empty.

    Returns:
        Mapping of missing field name to REQUIRED_MESSAGE (empty when valid)
    """
    return {name: REQUIRED_MESSAGE for name in names if not values.get(name)}
