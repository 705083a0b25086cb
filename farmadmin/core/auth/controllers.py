"""Admin sign-in landing and sign-out."""

from __future__ import annotations

from flask import Blueprint, redirect, render_template, request, url_for
from pydantic import ValidationError

from farmadmin.core.auth.auth_service import (
    authenticate_admin,
    get_current_session,
    sign_in,
    sign_out,
)
from farmadmin.core.auth.csrf import csrf_check_passes
from farmadmin.core.auth.schemas import LoginRequest
from farmadmin.extensions import limiter

admin_auth_bp = Blueprint("admin_auth", __name__)


def _sign_in_form(error: str | None = None, status: int = 200, email: str = ""):
    return render_template("auth/sign_in.html", error=error, email=email), status


@admin_auth_bp.get("/auth")
def sign_in_page():
    # Already signed in as an admin: skip the form.
    if get_current_session() is not None:
        return redirect(url_for("admin_pages.dashboard"))
    return _sign_in_form()


@admin_auth_bp.post("/auth")
@limiter.limit("10/minute")
def sign_in_submit():
    if not csrf_check_passes():
        return _sign_in_form("Your session expired. Please try again.", 403)
    try:
        data = LoginRequest.model_validate(request.form.to_dict())
    except ValidationError:
        return _sign_in_form("Enter your email and password.", 400, request.form.get("email", ""))

    user, is_admin = authenticate_admin(data.email, data.password)
    if user is None:
        return _sign_in_form("Invalid email or password.", 401, data.email)
    if not is_admin:
        return _sign_in_form("Admin access required.", 403, data.email)

    sign_in(user)
    return redirect(url_for("admin_pages.dashboard"))


@admin_auth_bp.post("/logout")
def logout():
    if not csrf_check_passes():
        return _sign_in_form("Your session expired. Please try again.", 403)
    sign_out()
    return redirect(url_for("admin_auth.sign_in_page"))
