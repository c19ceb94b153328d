"""
Tests for the compliance check/submit screens and JSON endpoints.
"""

from core.exceptions import BackendUnavailableError


class TestComplianceCheck:

    def test_hotel_common_name_defaulted(self, hotel_client):
        html = hotel_client.get("/compliance").get_data(as_text=True)
        assert 'name="commonName" value="grand-hotel"' in html

    def test_check_success(self, hotel_client, backend):
        backend.check_compliance.return_value = {
            "validationResults": {"status": "PASS"},
            "reportingStatus": "REPORTED",
        }

        response = hotel_client.post("/compliance/check", data={
            "commonName": "grand-hotel",
            "invoiceSerialNumber": "INV-0001",
        })

        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert "Compliant" in html
        assert "reportingStatus" in html
        (request,), _ = backend.check_compliance.call_args
        assert request.invoice_serial_number == "INV-0001"

    def test_check_requires_serial(self, hotel_client, backend):
        response = hotel_client.post("/compliance/check", data={"commonName": "grand-hotel"})

        assert response.status_code == 400
        backend.check_compliance.assert_not_called()

    def test_check_backend_down(self, admin_client, backend):
        backend.check_compliance.side_effect = BackendUnavailableError("http://backend.test/compliance/check")

        response = admin_client.post("/compliance/check", data={
            "commonName": "grand-hotel",
            "invoiceSerialNumber": "INV-0001",
        })

        html = response.get_data(as_text=True)
        assert response.status_code == 502
        assert "Network Error" in html
        assert "Compliant" not in html


class TestComplianceSubmit:

    def test_submit(self, admin_client, backend):
        backend.submit.return_value = {"submissionType": "CLEARANCE", "zatcaStatus": "CLEARED"}

        response = admin_client.post("/compliance/submit", data={
            "commonName": "grand-hotel",
            "invoiceSerialNumber": "INV-0001",
            "production": "on",
        })

        html = response.get_data(as_text=True)
        assert "CLEARANCE" in html
        assert "badge-success" in html
        (request,), _ = backend.submit.call_args
        assert request.production is True


class TestJsonEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.get_json() == {"status": "ok", "backend": "http://backend.test"}

    def test_egs_requires_login(self, client):
        assert client.get("/api/egs").status_code == 401

    def test_egs(self, admin_client):
        data = admin_client.get("/api/egs").get_json()
        assert [item["slug"] for item in data["items"]] == ["grand-hotel", "sea-view"]

    def test_egs_backend_down(self, admin_client, backend):
        backend.list_egs.side_effect = BackendUnavailableError("http://backend.test/compliance/egs")

        response = admin_client.get("/api/egs")

        assert response.status_code == 502
        assert response.get_json() == {"error": "Network Error"}
