"""
Tests for the invoice list, detail, authority response and PDF download.
"""

import pytest

from werkzeug.http import parse_options_header

from core.exceptions import BackendRequestError
from conftest import location_path


# Fixtures

@pytest.fixture
def invoices():
    return [
        {
            "invoiceNumber": "INV-0001",
            "issueDateTime": "2025-01-15T10:30:00Z",
            "invoiceCategory": "Simplified",
            "totalAmount": 1150,
            "status": "REPORTED",
        },
        {
            "invoiceNumber": "INV-0002",
            "issueDateTime": "2025-01-16T09:00:00Z",
            "invoiceCategory": "Standard",
            "totalAmount": 230.5,
            "status": "REJECTED",
        },
    ]


@pytest.fixture
def invoice():
    return {
        "invoiceNumber": "INV-0001",
        "issueDateTime": "2025-01-15T10:30:00Z",
        "invoiceTypeCode": "381",
        "invoiceTypeCodeName": "0211010",
        "status": "CLEARED",
        "sellerName": "Grand Hotel Riyadh",
        "sellerVatNumber": "300000000000003",
        "sellerAddress": "King Fahd Road",
        "items": [
            {"description": "Room", "quantity": 1, "unitPrice": 1000, "vatAmount": 150, "totalAmount": 1150},
        ],
        "subTotal": 1000,
        "vatAmount": 150,
        "totalAmount": 1150,
        "qrCode": "AQ1HcmFuZCBIb3RlbA==",
        "uuid": "3cf5ee18-ee25-44ea-a444-2c37ba7f28be",
        "submission": {"zatcaStatus": "CLEARED"},
    }


class TestInvoiceList:

    def test_hotel_lists_own_invoices(self, hotel_client, backend, invoices):
        backend.list_invoices.return_value = invoices

        html = hotel_client.get("/invoices-list").get_data(as_text=True)

        backend.list_invoices.assert_called_once_with("grand-hotel")
        assert 'href="/invoices-list/INV-0001"' in html
        assert "15 January 2025" in html
        assert "1,150.00 SAR" in html
        assert "badge-success" in html
        assert "badge-danger" in html

    def test_row_without_number_links_by_id(self, hotel_client, backend, invoices):
        del invoices[0]["invoiceNumber"]
        invoices[0]["id"] = "b7c1-42"
        backend.list_invoices.return_value = invoices

        response = hotel_client.get("/invoices-list")

        assert response.status_code == 200
        assert 'href="/invoices-list/b7c1-42"' in response.get_data(as_text=True)

    def test_row_without_any_id(self, hotel_client, backend, invoices):
        del invoices[0]["invoiceNumber"]
        backend.list_invoices.return_value = invoices

        response = hotel_client.get("/invoices-list")

        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert 'href="/invoices-list/INV-0002"' in html
        assert "<td>-</td>" in html

    def test_hotel_cannot_pick_property(self, hotel_client, backend):
        hotel_client.get("/invoices-list?property=sea-view")
        backend.list_invoices.assert_called_once_with("grand-hotel")

    def test_admin_without_selection(self, admin_client, backend):
        html = admin_client.get("/invoices-list").get_data(as_text=True)

        assert "Select a property to see its invoices." in html
        backend.list_invoices.assert_not_called()

    def test_admin_property_switch_refetches(self, admin_client, backend):
        admin_client.get("/invoices-list?property=grand-hotel")
        admin_client.get("/invoices-list?property=sea-view")

        assert [c.args for c in backend.list_invoices.call_args_list] == [
            ("grand-hotel",),
            ("sea-view",),
        ]

    def test_empty_list(self, hotel_client):
        html = hotel_client.get("/invoices-list").get_data(as_text=True)
        assert "No invoices yet." in html

    def test_backend_error(self, hotel_client, backend):
        backend.list_invoices.side_effect = BackendRequestError("EGS not found", status_code=404)

        html = hotel_client.get("/invoices-list").get_data(as_text=True)

        assert "EGS not found" in html
        assert "No invoices yet." not in html


class TestInvoiceDetail:

    def test_user_view(self, hotel_client, backend, invoice):
        backend.get_invoice.return_value = invoice

        html = hotel_client.get("/invoices-list/INV-0001").get_data(as_text=True)

        backend.get_invoice.assert_called_once_with("INV-0001")
        assert "Credit Note" in html
        assert "Simplified (B2C)" in html
        assert "Generic Customer" in html
        assert "No address provided" in html
        assert "3cf5ee18-ee25-44ea-a444-2c37ba7f28be" in html
        assert "N/A" in html
        assert "<svg" in html

    def test_developer_view(self, hotel_client, backend, invoice):
        backend.get_invoice.return_value = invoice

        html = hotel_client.get("/invoices-list/INV-0001?view=developer").get_data(as_text=True)

        assert "&#34;sellerVatNumber&#34;" in html or "&quot;sellerVatNumber&quot;" in html

    def test_not_found(self, hotel_client, backend):
        backend.get_invoice.side_effect = BackendRequestError("Invoice not found", status_code=404)

        response = hotel_client.get("/invoices-list/INV-9999")

        assert response.status_code == 502
        assert "Invoice not found" in response.get_data(as_text=True)

    def test_unexpected_invoice_body(self, hotel_client, backend):
        backend.get_invoice.return_value = ["INV-0001"]

        response = hotel_client.get("/invoices-list/INV-0001")

        assert response.status_code == 502
        assert "Unexpected invoice data from backend" in response.get_data(as_text=True)

    def test_zatca_response(self, hotel_client, backend):
        backend.get_zatca_response.return_value = {"reportingStatus": "REPORTED"}

        html = hotel_client.get("/invoices-list/INV-0001/zatca-response").get_data(as_text=True)

        backend.get_zatca_response.assert_called_once_with("INV-0001")
        assert "reportingStatus" in html


class TestPdf:

    def test_download(self, hotel_client, backend):
        backend.download_invoice_pdf.return_value = b"%PDF-1.7 test"

        response = hotel_client.get("/invoices-list/INV-0001/pdf")

        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert response.data == b"%PDF-1.7 test"
        disposition, options = parse_options_header(response.headers["Content-Disposition"])
        assert disposition == "attachment"
        assert options["filename"] == "inv-inv-0001.pdf"

    def test_download_name_with_quote(self, hotel_client, backend):
        backend.download_invoice_pdf.return_value = b"%PDF-1.7 test"

        response = hotel_client.get("/invoices-list/INV%221/pdf")

        assert response.status_code == 200
        backend.download_invoice_pdf.assert_called_once_with('INV"1')
        _, options = parse_options_header(response.headers["Content-Disposition"])
        assert options["filename"] == 'inv-inv"1.pdf'

    def test_download_name_non_latin(self, hotel_client, backend):
        backend.download_invoice_pdf.return_value = b"%PDF-1.7 test"

        response = hotel_client.get("/invoices-list/%D9%81%D8%A7%D8%AA%D9%88%D8%B1%D8%A9-1/pdf")

        assert response.status_code == 200
        assert "filename*=UTF-8''" in response.headers["Content-Disposition"]

    def test_download_failure_redirects(self, hotel_client, backend):
        backend.download_invoice_pdf.side_effect = BackendRequestError("PDF not available", status_code=404)

        response = hotel_client.get("/invoices-list/INV-0001/pdf")

        assert response.status_code == 302
        assert location_path(response) == "/invoices-list/INV-0001"
