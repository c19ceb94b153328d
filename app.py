"""
ZATCA Compliance Console - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env next to the executable wins)
2. Configures logging
3. Creates the backend client (one shared requests.Session)
4. Registers route blueprints and template filters
5. Sets up error handlers and context processors

ARCHITECTURE:
    Browser
    └── Flask request handling (this app, no local persistence)
        └── ZatcaBackendClient -> compliance backend (ZATCA_API_URL)

The session cookie holds only the signed-in role and active property.
Everything else is fetched from the backend on each request.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, flash, redirect, request, url_for

from logging_config import setup_logging, get_logger
from core.api_client import ZatcaBackendClient
from modules.formatting import register_filters
from routes import register_blueprints
from services.tenant import get_context, home_endpoint, nav_items, show_new_invoice_action


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In PyInstaller bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(config_object: str = "config.Config") -> Flask:
    """
    Application factory - creates and configures Flask app.

    The backend is not contacted at startup; an unreachable backend shows
    up as an inline error on the first screen that needs it.

    Args:
        config_object: Import path of the configuration class

    Returns:
        Configured Flask application

    Raises:
        ValueError: If ZATCA_API_URL is empty
    """
    # Load .env from base path (next to executable in production)
    # Use override=True so .env file always takes precedence over shell environment
    base_path = _get_base_path()
    env_file = base_path / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)  # Default behavior

    # Create Flask app
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = (
        app.config.get("ENVIRONMENT") == "production" and not app.config.get("TESTING")
    )

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting ZATCA console in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # BACKEND CLIENT
    # =========================================================================

    backend = ZatcaBackendClient(
        app.config["ZATCA_API_URL"],
        timeout_seconds=app.config["ZATCA_API_TIMEOUT"],
    )
    app.config["BACKEND_CLIENT"] = backend
    logger.info(f"Compliance backend: {backend.base_url}")

    def cleanup():
        """Cleanup on application shutdown."""
        logger.info("Shutting down...")
        backend.close()

    # Test apps are created per test; only real processes close on exit
    if not app.config.get("TESTING"):
        atexit.register(cleanup)

    # =========================================================================
    # REGISTER BLUEPRINTS AND FILTERS
    # =========================================================================

    register_blueprints(app)
    register_filters(app)

    # =========================================================================
    # CONTEXT PROCESSORS
    # =========================================================================

    @app.context_processor
    def inject_tenant():
        """Inject role, tenant and navigation into all templates."""
        ctx = get_context()
        return {
            "tenant": ctx,
            "nav_items": nav_items(ctx),
            "show_new_invoice": show_new_invoice_action(ctx),
            "current_endpoint": request.endpoint,
        }

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(404)
    def handle_not_found(e):
        flash("Page not found.", "warning")
        return redirect(url_for(home_endpoint(get_context())))

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        flash("An unexpected error occurred. Please try again.", "error")
        return redirect(url_for(home_endpoint(get_context())))

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
