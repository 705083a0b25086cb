"""Admin HTML pages. Every view goes through the admin page gate."""

from __future__ import annotations

from typing import Any, Callable

from flask import Blueprint, current_app, render_template, request

from farmadmin.core.auth.auth_service import get_current_session
from farmadmin.core.gate import render_admin_page
from farmadmin.core.utils.pagination import PageWindow, page_controls, parse_page_arg
from farmadmin.domains.admin.schemas.admin_schemas import ANALYTICS_RANGES
from farmadmin.domains.admin.services.admin_data_service import (
    get_all_farms,
    get_analytics_data,
    get_all_users,
    get_audit_logs,
    get_billing_overview,
    get_settings,
    get_system_overview,
)
from farmadmin.domains.support.models import TICKET_PRIORITIES, TICKET_STATUSES
from farmadmin.domains.support.services.support_service import get_all_tickets

admin_pages_bp = Blueprint("admin_pages", __name__)


def _gated(fetch_data: Callable[[], Any], render: Callable[[Any], Any]):
    return render_admin_page(
        get_current_session,
        fetch_data,
        render,
        login_route=current_app.config["ADMIN_LOGIN_ROUTE"],
    )


@admin_pages_bp.get("/")
@admin_pages_bp.get("/dashboard")
def dashboard():
    return _gated(
        get_system_overview,
        lambda overview: render_template("admin/dashboard.html", overview=overview),
    )


@admin_pages_bp.get("/analytics")
def analytics():
    time_range = request.args.get("range") or current_app.config["ANALYTICS_DEFAULT_RANGE"]
    if time_range not in ANALYTICS_RANGES:
        time_range = current_app.config["ANALYTICS_DEFAULT_RANGE"]
    return _gated(
        lambda: get_analytics_data(time_range),
        lambda summary: render_template(
            "admin/analytics.html", analytics=summary, ranges=list(ANALYTICS_RANGES)
        ),
    )


@admin_pages_bp.get("/audit-logs")
def audit_logs():
    limit = current_app.config["AUDIT_LOG_LIMIT"]
    return _gated(
        lambda: get_audit_logs(limit),
        lambda logs: render_template("admin/audit_logs.html", logs=logs),
    )


@admin_pages_bp.get("/farms")
def farms():
    window = PageWindow.for_page(
        parse_page_arg(request.args.get("page")), current_app.config["FARMS_PAGE_SIZE"]
    )
    return _gated(
        lambda: get_all_farms(window.limit, window.offset),
        lambda page: render_template(
            "admin/farms.html",
            farms=page.items,
            total_count=page.total_count,
            pagination=page_controls(window, page.total_count),
        ),
    )


@admin_pages_bp.get("/users")
def users():
    window = PageWindow.for_page(
        parse_page_arg(request.args.get("page")), current_app.config["USERS_PAGE_SIZE"]
    )
    return _gated(
        lambda: get_all_users(window.limit, window.offset),
        lambda page: render_template(
            "admin/users.html",
            users=page.items,
            total_count=page.total_count,
            pagination=page_controls(window, page.total_count),
        ),
    )


@admin_pages_bp.get("/support")
def support():
    # unknown filter values are dropped rather than rejected
    status = request.args.get("status")
    if status not in TICKET_STATUSES:
        status = None
    priority = request.args.get("priority")
    if priority not in TICKET_PRIORITIES:
        priority = None
    return _gated(
        lambda: get_all_tickets(status=status, priority=priority),
        lambda tickets: render_template(
            "admin/support.html",
            tickets=tickets,
            status=status,
            priority=priority,
            statuses=TICKET_STATUSES,
            priorities=TICKET_PRIORITIES,
        ),
    )


@admin_pages_bp.get("/billing")
def billing():
    return _gated(
        get_billing_overview,
        lambda overview: render_template("admin/billing.html", billing=overview),
    )


@admin_pages_bp.get("/settings")
def settings():
    return _gated(
        get_settings,
        lambda values: render_template("admin/settings.html", settings=values),
    )
