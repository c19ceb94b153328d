"""
Configuration for the ZATCA compliance console.

The console is a thin front end: every operation is delegated to the
compliance backend at ZATCA_API_URL.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    SESSION_COOKIE_NAME = "zatca_console_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # Compliance backend
    ZATCA_API_URL = os.environ.get("ZATCA_API_URL", "http://localhost:3000")
    ZATCA_API_TIMEOUT = float(os.environ.get("ZATCA_API_TIMEOUT", "30"))

    # ==========================================================================
    # Invoice Defaults
    # ==========================================================================
    # DEFAULT_VAT_PERCENT: VAT rate applied to new invoice lines.
    #   Saudi standard rate is 15%.
    #
    # DEFAULT_CURRENCY: Document currency sent with every invoice.
    # ==========================================================================
    DEFAULT_VAT_PERCENT = float(os.environ.get("DEFAULT_VAT_PERCENT", "15"))
    DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "SAR")


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 3600  # 1 hour


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    SECRET_KEY = "test-secret-key"
    ZATCA_API_URL = "http://backend.test"
