"""
EGS (E-invoice Generation Solution) models.

An EGS unit is one registered hotel property. The backend owns it; the
console only lists it, lets a hotel user pick one as their tenant, and
copies its VAT number into invoice drafts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any, List, Optional


@dataclass(frozen=True)
class EgsListItem:
    """A registered property as returned by GET /compliance/egs."""

    slug: str
    """Property identifier; used as the certificate common name."""

    organization_name: str
    """Display name of the hotel."""

    vat_number: str
    """15-digit VAT registration number."""

    production: bool = False
    """Whether the property's certificates target the production environment."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the backend's camelCase shape (also used for session storage)."""
        return {
            "slug": self.slug,
            "organizationName": self.organization_name,
            "vatNumber": self.vat_number,
            "production": self.production,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EgsListItem":
        """Create from backend JSON or from session storage."""
        return cls(
            slug=str(data.get("slug", "")),
            organization_name=str(data.get("organizationName", "")),
            vat_number=str(data.get("vatNumber", "")),
            production=bool(data.get("production", False)),
        )


def find_by_slug(items: List[EgsListItem], slug: str) -> Optional[EgsListItem]:
    """Return the property with the given slug, or None."""
    if not slug:
        return None
    for item in items:
        if item.slug == slug:
            return item
    return None
