"""
Registered-property lookup.

Several screens need the property list only to fill a dropdown. A failing
list call must not break those screens, so the error is logged and
returned next to an empty list for the page to show as a notice.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from core.exceptions import ZatcaConsoleError
from logging_config import get_logger
from models.egs import EgsListItem


# Module logger
logger = get_logger(__name__)


def fetch_properties(client) -> Tuple[List[EgsListItem], Optional[str]]:
    """
    List registered properties.

    Returns:
        (properties, error message or None)
    """
    try:
        return client.list_egs(), None
    except ZatcaConsoleError as e:
        logger.error(f"Failed to fetch properties: {e}")
        return [], e.message
