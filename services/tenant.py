"""
Tenant/session context.

Holds the signed-in role (ADMIN or HOTEL) and, for hotel users, the active
tenant (one EgsListItem). Both live in the signed session cookie so they
survive page reloads; there is no server-side session store.

Session keys:
    zatca_user_role     "ADMIN" | "HOTEL"
    zatca_active_tenant {"slug", "organizationName", "vatNumber", ...}

Usage:
    from services.tenant import get_context, login, logout, role_required

    @bp.route("/onboarding")
    @role_required(UserRole.ADMIN)
    def onboarding():
        ctx = get_context()
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Any, Dict, List, Optional

from flask import flash, redirect, session, url_for

from logging_config import get_logger
from models.egs import EgsListItem


# Module logger
logger = get_logger(__name__)

ROLE_KEY = "zatca_user_role"
TENANT_KEY = "zatca_active_tenant"


class UserRole(Enum):
    """Who is using the console."""

    ADMIN = "ADMIN"
    """Platform administrator: onboards properties, issues certificates."""

    HOTEL = "HOTEL"
    """A single property's staff: issues and tracks that property's invoices."""


# Landing page per role
HOME_ENDPOINTS = {
    UserRole.ADMIN: "onboarding.onboarding",
    UserRole.HOTEL: "invoices_list.invoices_list",
}


@dataclass(frozen=True)
class TenantContext:
    """Snapshot of the session's role and tenant for one request."""

    user_role: Optional[UserRole] = None
    active_tenant: Optional[EgsListItem] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_role is not None

    @property
    def is_admin(self) -> bool:
        return self.user_role is UserRole.ADMIN

    @property
    def is_hotel(self) -> bool:
        return self.user_role is UserRole.HOTEL

    @property
    def display_name(self) -> str:
        """Header brand line."""
        if self.active_tenant:
            return self.active_tenant.organization_name
        if self.is_admin:
            return "Admin Portal"
        return "ZATCA System"

    @property
    def display_subtitle(self) -> str:
        if self.active_tenant:
            return "Phase-2 E-Invoicing"
        if self.is_admin:
            return "Configuration Mode"
        return "Select Identity"

    @property
    def user_label(self) -> str:
        """User menu label."""
        if self.active_tenant:
            return self.active_tenant.slug
        return "Administrator"


def _parse_role(value: Any) -> Optional[UserRole]:
    try:
        return UserRole(value)
    except ValueError:
        return None


def get_context() -> TenantContext:
    """
    Load role and tenant from the session.

    A stored tenant is only honoured for HOTEL users; an unreadable tenant
    entry is logged and ignored.
    """
    role = _parse_role(session.get(ROLE_KEY))
    if role is None:
        return TenantContext()

    tenant = None
    if role is UserRole.HOTEL:
        stored = session.get(TENANT_KEY)
        if isinstance(stored, dict) and stored.get("slug"):
            tenant = EgsListItem.from_dict(stored)
        elif stored is not None:
            logger.warning("Failed to parse stored tenant, ignoring it")

    return TenantContext(user_role=role, active_tenant=tenant)


def login(role: UserRole, tenant: Optional[EgsListItem] = None) -> TenantContext:
    """
    Store role (and tenant for HOTEL users) in the session.

    Raises:
        ValueError: If a HOTEL login has no tenant
    """
    if role is UserRole.HOTEL and tenant is None:
        raise ValueError("A hotel login requires a property")

    session[ROLE_KEY] = role.value
    if role is UserRole.HOTEL:
        session[TENANT_KEY] = tenant.to_dict()
        logger.info(f"Hotel login: {tenant.slug}")
    else:
        session.pop(TENANT_KEY, None)
        logger.info("Admin login")
    session.modified = True

    return get_context()


def logout() -> None:
    """Clear role and tenant."""
    session.pop(ROLE_KEY, None)
    session.pop(TENANT_KEY, None)
    session.modified = True
    logger.info("Logged out")


def home_endpoint(ctx: TenantContext) -> str:
    """Endpoint a user lands on after login (login screen when signed out)."""
    if ctx.user_role is None:
        return "auth.login_page"
    return HOME_ENDPOINTS[ctx.user_role]


def role_required(*roles: UserRole):
    """
    Restrict a view to signed-in users, optionally of specific roles.

    Signed-out users are sent to the login screen; users with another role
    are sent to their own home page.
    """
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            ctx = get_context()
            if not ctx.is_authenticated:
                flash("Please log in to continue.", "warning")
                return redirect(url_for("auth.login_page"))
            if roles and ctx.user_role not in roles:
                logger.warning(
                    f"{ctx.user_role.value} user denied access to {view.__name__}"
                )
                flash("That page is not available for your role.", "error")
                return redirect(url_for(home_endpoint(ctx)))
            return view(*args, **kwargs)
        return wrapped
    return decorator


# =============================================================================
# NAVIGATION
# =============================================================================

_NAV_ITEMS = {
    UserRole.ADMIN: [
        {"endpoint": "onboarding.onboarding", "label": "Onboarding"},
        {"endpoint": "invoices_list.invoices_list", "label": "Invoices"},
        {"endpoint": "compliance.compliance", "label": "Compliance"},
    ],
    UserRole.HOTEL: [
        {"endpoint": "invoices_list.invoices_list", "label": "Invoices"},
        {"endpoint": "compliance.compliance", "label": "Compliance"},
    ],
}


def nav_items(ctx: TenantContext) -> List[Dict[str, str]]:
    """Header links for the session's role (none when signed out)."""
    if ctx.user_role is None:
        return []
    return [dict(item) for item in _NAV_ITEMS[ctx.user_role]]


def show_new_invoice_action(ctx: TenantContext) -> bool:
    """The "New Invoice" header button is for hotel users only."""
    return ctx.is_hotel
