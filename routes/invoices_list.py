"""
Invoice list and detail routes.

Handles:
- /invoices-list - Invoices of the active property (admins pick one)
- /invoices-list/<id> - One invoice (user view or developer/raw view)
- /invoices-list/<id>/zatca-response - Raw authority response
- /invoices-list/<id>/pdf - PDF download proxied from the backend
"""

import io

from flask import (
    Blueprint,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    send_file,
    url_for,
)

from core.exceptions import ZatcaConsoleError
from logging_config import get_logger
from models.egs import find_by_slug
from modules.qr import render_qr_svg
from services.properties import fetch_properties
from services.tenant import get_context, role_required


# Module logger
logger = get_logger(__name__)

invoices_list_bp = Blueprint("invoices_list", __name__)

VIEW_MODES = ("user", "developer")


@invoices_list_bp.route("/invoices-list", methods=["GET"])
@role_required()
def invoices_list():
    """
    List invoices for one property.

    Hotel users always see their own property. Administrators choose a
    property with ?property=<slug>; each selection fetches that list anew.
    """
    ctx = get_context()
    backend = current_app.config["BACKEND_CLIENT"]

    properties, properties_error = [], None
    if ctx.is_hotel:
        selected = ctx.active_tenant
    else:
        properties, properties_error = fetch_properties(backend)
        selected = find_by_slug(properties, request.args.get("property", ""))

    invoices, error = [], None
    if selected is not None:
        try:
            invoices = backend.list_invoices(selected.slug)
        except ZatcaConsoleError as e:
            logger.error(f"Failed to fetch invoices for {selected.slug}: {e}")
            error = e.message

    return render_template(
        "invoices/list.html",
        selected=selected,
        properties=properties,
        properties_error=properties_error,
        invoices=invoices,
        error=error,
    )


@invoices_list_bp.route("/invoices-list/<invoice_id>", methods=["GET"])
@role_required()
def invoice_detail(invoice_id: str):
    """Display one invoice."""
    view = request.args.get("view", "user")
    if view not in VIEW_MODES:
        view = "user"

    try:
        invoice = current_app.config["BACKEND_CLIENT"].get_invoice(invoice_id)
    except ZatcaConsoleError as e:
        logger.error(f"Failed to fetch invoice {invoice_id}: {e}")
        return render_template(
            "invoices/detail.html",
            invoice=None,
            invoice_id=invoice_id,
            error=e.message,
            view=view,
            qr_svg=None,
        ), 502

    if not invoice:
        return render_template(
            "invoices/detail.html",
            invoice=None,
            invoice_id=invoice_id,
            error="Invoice not found",
            view=view,
            qr_svg=None,
        ), 404

    if not isinstance(invoice, dict):
        logger.error(f"Unexpected invoice body for {invoice_id}: {type(invoice).__name__}")
        return render_template(
            "invoices/detail.html",
            invoice=None,
            invoice_id=invoice_id,
            error="Unexpected invoice data from backend",
            view=view,
            qr_svg=None,
        ), 502

    return render_template(
        "invoices/detail.html",
        invoice=invoice,
        invoice_id=invoice_id,
        error=None,
        view=view,
        qr_svg=render_qr_svg(invoice.get("qrCode")),
    )


@invoices_list_bp.route("/invoices-list/<invoice_id>/zatca-response", methods=["GET"])
@role_required()
def zatca_response(invoice_id: str):
    """Display the authority's raw response for one invoice."""
    try:
        response = current_app.config["BACKEND_CLIENT"].get_zatca_response(invoice_id)
        error = None
    except ZatcaConsoleError as e:
        logger.error(f"Failed to fetch ZATCA response for {invoice_id}: {e}")
        response, error = None, e.message

    return render_template(
        "invoices/zatca_response.html",
        invoice_id=invoice_id,
        response=response,
        error=error,
    ), (200 if error is None else 502)


@invoices_list_bp.route("/invoices-list/<invoice_id>/pdf", methods=["GET"])
@role_required()
def invoice_pdf(invoice_id: str):
    """Download the invoice PDF as inv-<number>.pdf."""
    try:
        content = current_app.config["BACKEND_CLIENT"].download_invoice_pdf(invoice_id)
    except ZatcaConsoleError as e:
        logger.error(f"PDF download failed for {invoice_id}: {e}")
        flash(f"Failed to download PDF: {e.message}", "error")
        return redirect(url_for("invoices_list.invoice_detail", invoice_id=invoice_id))

    return send_file(
        io.BytesIO(content),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=f"inv-{invoice_id.lower()}.pdf",
    )
