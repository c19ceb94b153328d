"""
Services layer for the ZATCA compliance console.

This module contains the session-scoped services:
- tenant: Role/tenant session context, login/logout, role guard, navigation

All compliance work is done by the backend; see core.api_client.
"""

from .tenant import (
    TenantContext,
    UserRole,
    get_context,
    login,
    logout,
    nav_items,
    role_required,
)

__all__ = [
    "TenantContext",
    "UserRole",
    "get_context",
    "login",
    "logout",
    "nav_items",
    "role_required",
]
