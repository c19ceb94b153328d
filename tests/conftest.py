"""
Shared fixtures for the console tests.

The backend client is replaced by a MagicMock so no test touches the network.
"""

from urllib.parse import urlparse

import pytest
from unittest.mock import MagicMock

from app import create_app
from core.api_client import ZatcaBackendClient
from models.egs import EgsListItem


# Fixtures

@pytest.fixture
def properties():
    """Two registered properties."""
    return [
        EgsListItem(
            slug="grand-hotel",
            organization_name="Grand Hotel Riyadh",
            vat_number="300000000000003",
        ),
        EgsListItem(
            slug="sea-view",
            organization_name="Sea View Resort",
            vat_number="310000000000003",
        ),
    ]


@pytest.fixture
def backend(properties):
    """Mock backend client listing ``properties``."""
    backend = MagicMock(spec=ZatcaBackendClient)
    backend.base_url = "http://backend.test"
    backend.list_egs.return_value = properties
    backend.list_invoices.return_value = []
    return backend


@pytest.fixture
def app(backend):
    """App built with the testing config and the mock backend."""
    app = create_app("config.TestingConfig")
    app.config["BACKEND_CLIENT"] = backend
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def login_as(client, role, tenant=None):
    """Put a role (and tenant) straight into the session cookie."""
    with client.session_transaction() as sess:
        sess["zatca_user_role"] = role
        if tenant is not None:
            sess["zatca_active_tenant"] = tenant.to_dict()


@pytest.fixture
def admin_client(client):
    login_as(client, "ADMIN")
    return client


@pytest.fixture
def hotel_client(client, properties):
    login_as(client, "HOTEL", properties[0])
    return client


def location_path(response):
    """Path part of a redirect's Location header."""
    return urlparse(response.headers["Location"]).path
