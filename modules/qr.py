"""
QR code rendering.

The backend builds the ZATCA TLV payload (base64); the console only draws
it. Output is inline SVG so no image library is required.
"""

from __future__ import annotations

from typing import Optional

import qrcode
from markupsafe import Markup
from qrcode.constants import ERROR_CORRECT_M
from qrcode.exceptions import DataOverflowError
from qrcode.image.svg import SvgPathImage

from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


def render_qr_svg(payload: Optional[str], box_size: int = 10) -> Optional[Markup]:
    """
    Render a QR payload as an inline ``<svg>`` element.

    Args:
        payload: Base64 TLV string from the backend
        box_size: Pixel size of one module

    Returns:
        SVG markup, or None when there is no payload or it cannot be encoded
    """
    if not payload:
        return None

    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=box_size,
        border=4,
        image_factory=SvgPathImage,
    )
    try:
        qr.add_data(payload)
        qr.make(fit=True)
    except DataOverflowError:
        logger.warning(f"QR payload too large to encode ({len(payload)} chars)")
        return None

    image = qr.make_image()
    return Markup(image.to_string(encoding="unicode"))
