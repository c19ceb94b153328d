"""
Tests for login, logout and the role guard.
"""

from core.exceptions import BackendUnavailableError
from conftest import location_path


class TestLoginScreen:

    def test_admin_tab_does_not_fetch_properties(self, client, backend):
        response = client.get("/")

        assert response.status_code == 200
        assert b"Continue as Administrator" in response.data
        backend.list_egs.assert_not_called()

    def test_hotel_tab_lists_properties(self, client, backend):
        response = client.get("/?tab=hotel")

        assert response.status_code == 200
        assert b"Grand Hotel Riyadh" in response.data
        assert b"Sea View Resort" in response.data

    def test_hotel_tab_without_properties(self, client, backend):
        backend.list_egs.return_value = []

        response = client.get("/?tab=hotel")

        assert b"No active hotels found. Please contact admin." in response.data

    def test_hotel_tab_backend_down(self, client, backend):
        backend.list_egs.side_effect = BackendUnavailableError("http://backend.test/compliance/egs")

        response = client.get("/?tab=hotel")

        assert response.status_code == 200
        assert b"No active hotels found" in response.data

    def test_signed_in_admin_redirected_home(self, admin_client):
        response = admin_client.get("/")
        assert response.status_code == 302
        assert location_path(response) == "/onboarding"

    def test_signed_in_hotel_redirected_home(self, hotel_client):
        response = hotel_client.get("/")
        assert location_path(response) == "/invoices-list"


class TestLogin:

    def test_admin_login(self, client):
        response = client.post("/login", data={"role": "ADMIN"})

        assert location_path(response) == "/onboarding"
        with client.session_transaction() as sess:
            assert sess["zatca_user_role"] == "ADMIN"
            assert "zatca_active_tenant" not in sess

    def test_hotel_login(self, client):
        response = client.post("/login", data={"role": "HOTEL", "hotel": "sea-view"})

        assert location_path(response) == "/invoices-list"
        with client.session_transaction() as sess:
            assert sess["zatca_user_role"] == "HOTEL"
            assert sess["zatca_active_tenant"]["slug"] == "sea-view"
            assert sess["zatca_active_tenant"]["organizationName"] == "Sea View Resort"

    def test_hotel_login_requires_selection(self, client):
        response = client.post("/login", data={"role": "HOTEL"})

        assert location_path(response) == "/"
        with client.session_transaction() as sess:
            assert "zatca_user_role" not in sess

    def test_hotel_login_unknown_slug(self, client):
        response = client.post("/login", data={"role": "HOTEL", "hotel": "no-such-hotel"})

        assert location_path(response) == "/"
        with client.session_transaction() as sess:
            assert "zatca_user_role" not in sess

    def test_unknown_role(self, client):
        client.post("/login", data={"role": "ROOT"})
        with client.session_transaction() as sess:
            assert "zatca_user_role" not in sess


class TestLogout:

    def test_logout_clears_session(self, hotel_client):
        response = hotel_client.post("/logout")

        assert location_path(response) == "/"
        with hotel_client.session_transaction() as sess:
            assert "zatca_user_role" not in sess
            assert "zatca_active_tenant" not in sess

    def test_login_screen_after_logout(self, hotel_client):
        hotel_client.post("/logout")
        response = hotel_client.get("/", follow_redirects=True)

        assert b"You have been logged out." in response.data
        assert b"Continue as Administrator" in response.data


class TestRoleGuard:

    def test_anonymous_redirected_to_login(self, client):
        response = client.get("/invoices")
        assert location_path(response) == "/"

    def test_hotel_cannot_onboard(self, hotel_client, backend):
        response = hotel_client.post("/onboarding/onboard", data={"commonName": "x"})

        assert location_path(response) == "/invoices-list"
        backend.onboard.assert_not_called()

    def test_unknown_page_redirects(self, admin_client):
        response = admin_client.get("/does-not-exist")
        assert location_path(response) == "/onboarding"

    def test_corrupt_tenant_ignored(self, client):
        with client.session_transaction() as sess:
            sess["zatca_user_role"] = "HOTEL"
            sess["zatca_active_tenant"] = "garbage"

        response = client.get("/compliance")

        assert response.status_code == 200
