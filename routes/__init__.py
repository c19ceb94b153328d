"""
Flask route blueprints for the compliance console.

This module contains all route handlers organized by screen:
- auth: Login screen, login/logout
- onboarding: Property onboarding and certificates (admin)
- invoices: Invoice creation, signing and submission
- invoices_list: Invoice list, detail, authority response, PDF
- compliance: Compliance check and submission by serial number
- api: JSON endpoints (health, properties, totals)

Each blueprint is registered with the Flask app in create_app().
"""

from .auth import auth_bp
from .onboarding import onboarding_bp
from .invoices import invoices_bp
from .invoices_list import invoices_list_bp
from .compliance import compliance_bp
from .api import api_bp

__all__ = [
    "auth_bp",
    "onboarding_bp",
    "invoices_bp",
    "invoices_list_bp",
    "compliance_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(auth_bp)
    app.register_blueprint(onboarding_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(invoices_list_bp)
    app.register_blueprint(compliance_bp)
    app.register_blueprint(api_bp)
