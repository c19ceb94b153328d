"""
Login/logout routes.

Handles:
- / - Role selection screen (admin tab, hotel tab)
- /login - Store the chosen role (and property for hotel users)
- /logout - Clear the session and return to the login screen
"""

from flask import (
    Blueprint,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)

from logging_config import get_logger
from models.egs import find_by_slug
from modules.forms import get_text
from services.properties import fetch_properties
from services.tenant import UserRole, get_context, home_endpoint, login, logout


# Module logger
logger = get_logger(__name__)

auth_bp = Blueprint("auth", __name__)

LOGIN_TABS = ("admin", "hotel")


@auth_bp.route("/", methods=["GET"])
def login_page():
    """
    Display the login screen.

    Signed-in users are sent straight to their home page.
    The hotel tab lists registered properties from the backend.
    """
    ctx = get_context()
    if ctx.is_authenticated:
        return redirect(url_for(home_endpoint(ctx)))

    tab = request.args.get("tab", "admin")
    if tab not in LOGIN_TABS:
        tab = "admin"

    hotels, properties_error = [], None
    if tab == "hotel":
        hotels, properties_error = fetch_properties(current_app.config["BACKEND_CLIENT"])

    return render_template(
        "login.html",
        tab=tab,
        hotels=hotels,
        properties_error=properties_error,
    )


@auth_bp.route("/login", methods=["POST"])
def login_submit():
    """
    Sign in as administrator or as one hotel property.

    The posted hotel slug must match a property the backend currently lists.
    """
    role = request.form.get("role", "")

    if role == UserRole.ADMIN.value:
        login(UserRole.ADMIN)
        return redirect(url_for("onboarding.onboarding"))

    if role == UserRole.HOTEL.value:
        slug = get_text(request.form, "hotel")
        if not slug:
            flash("Please select a hotel property.", "error")
            return redirect(url_for("auth.login_page", tab="hotel"))

        hotels, properties_error = fetch_properties(current_app.config["BACKEND_CLIENT"])
        hotel = find_by_slug(hotels, slug)
        if hotel is None:
            flash(properties_error or "Selected hotel is not registered.", "error")
            return redirect(url_for("auth.login_page", tab="hotel"))

        login(UserRole.HOTEL, hotel)
        return redirect(url_for("invoices_list.invoices_list"))

    logger.warning(f"Login attempted with unknown role: {role!r}")
    flash("Unknown role.", "error")
    return redirect(url_for("auth.login_page"))


@auth_bp.route("/logout", methods=["POST"])
def logout_submit():
    """Clear role and tenant, then return to the login screen."""
    logout()
    flash("You have been logged out.", "success")
    return redirect(url_for("auth.login_page"))
