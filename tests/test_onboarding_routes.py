"""
Tests for the onboarding screens (administrators only).
"""

import pytest

from core.exceptions import BackendRequestError, BackendUnavailableError
from models.compliance import IssueCsidRequest, OnboardEgsRequest, ProductionCsidRequest


# Fixtures

@pytest.fixture
def onboard_form():
    return {
        "commonName": "grand-hotel",
        "serialNumber": "1-TST|2-TST|3-ABCD1234",
        "organizationIdentifier": "300000000000003",
        "organizationUnitName": "Riyadh Branch",
        "organizationName": "Grand Hotel Riyadh",
        "countryName": "SA",
        "invoiceType": "1100",
        "industryBusinessCategory": "Hotels and Accommodation",
        "locationAddress": "King Fahd Road",
    }


class TestOnboardingPage:

    @pytest.mark.parametrize("tab,button", [
        ("onboard", "Onboard Property"),
        ("issue", "Issue Compliance CSID"),
        ("production", "Issue Production CSID"),
    ])
    def test_tabs(self, admin_client, tab, button):
        response = admin_client.get(f"/onboarding?tab={tab}")

        assert response.status_code == 200
        assert button in response.get_data(as_text=True)

    def test_defaults_prefilled(self, admin_client):
        html = admin_client.get("/onboarding").get_data(as_text=True)
        assert 'value="Hotels and Accommodation"' in html


class TestOnboard:

    def test_blank_form_makes_no_backend_call(self, admin_client, backend):
        response = admin_client.post("/onboarding/onboard", data={})

        assert response.status_code == 400
        assert "Field required" in response.get_data(as_text=True)
        backend.onboard.assert_not_called()

    def test_success_shows_result_and_clears_form(self, admin_client, backend, onboard_form):
        backend.onboard.return_value = {
            "message": "EGS onboarded successfully",
            "csr": "-----BEGIN CERTIFICATE REQUEST-----",
        }

        response = admin_client.post("/onboarding/onboard", data=onboard_form)

        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert "EGS onboarded successfully" in html
        assert "BEGIN CERTIFICATE REQUEST" in html
        assert 'value="1-TST|2-TST|3-ABCD1234"' not in html

        (request,), _ = backend.onboard.call_args
        assert isinstance(request, OnboardEgsRequest)
        assert request.common_name == "grand-hotel"

    def test_backend_error_keeps_values(self, admin_client, backend, onboard_form):
        backend.onboard.side_effect = BackendRequestError(
            "EGS grand-hotel already exists", status_code=409
        )

        response = admin_client.post("/onboarding/onboard", data=onboard_form)

        html = response.get_data(as_text=True)
        assert response.status_code == 502
        assert "EGS grand-hotel already exists" in html
        assert 'value="Grand Hotel Riyadh"' in html

    def test_backend_down(self, admin_client, backend, onboard_form):
        backend.onboard.side_effect = BackendUnavailableError("http://backend.test/compliance/onboard")

        response = admin_client.post("/onboarding/onboard", data=onboard_form)

        assert "Network Error" in response.get_data(as_text=True)


class TestCsid:

    def test_issue_csid(self, admin_client, backend):
        backend.issue_csid.return_value = {"message": "Compliance CSID issued"}

        response = admin_client.post(
            "/onboarding/issue-csid", data={"commonName": "grand-hotel", "otp": "123456"}
        )

        assert response.status_code == 200
        (request,), _ = backend.issue_csid.call_args
        assert isinstance(request, IssueCsidRequest)
        assert request.otp == "123456"

    def test_issue_csid_without_otp(self, admin_client, backend):
        response = admin_client.post("/onboarding/issue-csid", data={"commonName": "grand-hotel"})

        assert response.status_code == 400
        backend.issue_csid.assert_not_called()

    def test_production_csid(self, admin_client, backend):
        backend.issue_production_csid.return_value = {"message": "Production CSID issued"}

        response = admin_client.post("/onboarding/production", data={"commonName": "grand-hotel"})

        assert "Production CSID issued" in response.get_data(as_text=True)
        (request,), _ = backend.issue_production_csid.call_args
        assert isinstance(request, ProductionCsidRequest)
        assert request.production is True
