"""Admin JSON API: farms, users, support tickets, billing and system settings."""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request
from pydantic import ValidationError

from farmadmin.core.utils.decorators import admin_session_required, csrf_protected
from farmadmin.domains.admin.schemas.admin_schemas import (
    ActivateUserRequest,
    SettingsUpdate,
    SubscriptionStatusRequest,
    SuspendFarmRequest,
    SuspendUserRequest,
)
from farmadmin.domains.admin.services.admin_data_service import (
    delete_farm,
    get_billing_overview,
    get_farm_details,
    get_settings,
    get_user_details,
    set_user_status,
    suspend_farm,
    update_settings,
    update_subscription_status,
)
from farmadmin.domains.support.schemas.support_schemas import (
    CreateTicketRequest,
    TicketFilter,
    UpdateTicketRequest,
)
from farmadmin.domains.support.services.support_service import (
    create_ticket,
    get_all_tickets,
    get_ticket_details,
    update_ticket,
)

admin_api_bp = Blueprint("admin_api", __name__)


def _jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors()
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return errors


def _bad_request(exc: ValidationError):
    return jsonify({"ok": False, "error": "bad_request", "details": _jsonable_errors(exc)}), 400


def _not_found():
    return jsonify({"ok": False, "error": "not_found"}), 404


@admin_api_bp.get("/farms/<int:farm_id>")
@admin_session_required
def farm_details(farm_id: int):
    details = get_farm_details(farm_id)
    if details is None:
        return _not_found()
    return jsonify({"ok": True, "farm": details.model_dump(mode="json")})


@admin_api_bp.delete("/farms/<int:farm_id>")
@admin_session_required
@csrf_protected
def farm_delete(farm_id: int):
    if not delete_farm(farm_id, actor_id=g.admin_session.user_id):
        return _not_found()
    return jsonify({"ok": True})


@admin_api_bp.post("/farms/suspend")
@admin_session_required
@csrf_protected
def farm_suspend():
    payload = request.get_json(silent=True) or {}
    try:
        data = SuspendFarmRequest.model_validate(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    if not suspend_farm(data.farm_id, actor_id=g.admin_session.user_id):
        return _not_found()
    return jsonify({"ok": True})


@admin_api_bp.post("/users/activate")
@admin_session_required
@csrf_protected
def user_activate():
    payload = request.get_json(silent=True) or {}
    try:
        data = ActivateUserRequest.model_validate(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    updated = set_user_status(data.user_id, "active", actor_id=g.admin_session.user_id)
    if updated is None:
        return _not_found()
    return jsonify({"ok": True, "updated_roles": updated})


@admin_api_bp.get("/users/<int:user_id>")
@admin_session_required
def user_details(user_id: int):
    details = get_user_details(user_id)
    if details is None:
        return _not_found()
    return jsonify({"ok": True, "user": details.model_dump(mode="json")})


@admin_api_bp.post("/users/suspend")
@admin_session_required
@csrf_protected
def user_suspend():
    payload = request.get_json(silent=True) or {}
    try:
        data = SuspendUserRequest.model_validate(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    updated = set_user_status(
        data.user_id, "suspended", actor_id=g.admin_session.user_id, reason=data.reason
    )
    if updated is None:
        return _not_found()
    return jsonify({"ok": True, "updated_roles": updated})


# --- Support tickets ---


@admin_api_bp.get("/support")
@admin_session_required
def ticket_list():
    try:
        filters = TicketFilter.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return _bad_request(exc)
    tickets = get_all_tickets(status=filters.status, priority=filters.priority)
    return jsonify({"ok": True, "tickets": [t.model_dump(mode="json") for t in tickets]})


@admin_api_bp.post("/support/create")
@admin_session_required
@csrf_protected
def ticket_create():
    payload = request.get_json(silent=True) or {}
    try:
        data = CreateTicketRequest.model_validate(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    try:
        ticket = create_ticket(
            data.subject,
            data.description,
            priority=data.priority,
            user_id=data.user_id,
            farm_id=data.farm_id,
            actor_id=g.admin_session.user_id,
        )
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    return jsonify({"ok": True, "ticket": ticket.model_dump(mode="json")}), 201


@admin_api_bp.get("/tickets/<int:ticket_id>")
@admin_session_required
def ticket_details(ticket_id: int):
    ticket = get_ticket_details(ticket_id)
    if ticket is None:
        return _not_found()
    return jsonify({"ok": True, "ticket": ticket.model_dump(mode="json")})


@admin_api_bp.patch("/tickets/<int:ticket_id>")
@admin_session_required
@csrf_protected
def ticket_update(ticket_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = UpdateTicketRequest.model_validate(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    try:
        ticket = update_ticket(ticket_id, data.changes(), actor_id=g.admin_session.user_id)
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    if ticket is None:
        return _not_found()
    return jsonify({"ok": True, "ticket": ticket.model_dump(mode="json")})


# --- Billing ---


@admin_api_bp.get("/billing")
@admin_session_required
def billing_overview():
    return jsonify({"ok": True, "billing": get_billing_overview().model_dump(mode="json")})


@admin_api_bp.post("/subscriptions/<int:subscription_id>/status")
@admin_session_required
@csrf_protected
def subscription_status(subscription_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = SubscriptionStatusRequest.model_validate(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    subscription = update_subscription_status(
        subscription_id, data.status, actor_id=g.admin_session.user_id
    )
    if subscription is None:
        return _not_found()
    return jsonify({"ok": True, "subscription": subscription.model_dump(mode="json")})


# --- System settings ---


@admin_api_bp.get("/settings")
@admin_session_required
def settings_read():
    return jsonify({"ok": True, "settings": get_settings()})


@admin_api_bp.put("/settings")
@admin_session_required
@csrf_protected
def settings_update():
    payload = request.get_json(silent=True)
    try:
        data = SettingsUpdate.model_validate(payload)
    except ValidationError as exc:
        return _bad_request(exc)
    settings = update_settings(data.root, actor_id=g.admin_session.user_id)
    return jsonify({"ok": True, "settings": settings})
