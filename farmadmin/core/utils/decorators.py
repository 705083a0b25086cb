"""Reusable decorators for the admin JSON API."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import g, jsonify

from farmadmin.core.auth.auth_service import get_current_session
from farmadmin.core.auth.csrf import csrf_check_passes

F = TypeVar("F", bound=Callable)


def admin_session_required(fn: F) -> F:
    """Reject the call with 401 unless an admin session exists.

    The session is exposed to the view as ``g.admin_session``.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        admin_session = get_current_session()
        if admin_session is None:
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        g.admin_session = admin_session
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def csrf_protected(fn: F) -> F:
    """Validate the CSRF token from the X-CSRF-Token header."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if not csrf_check_passes():
            return jsonify({"ok": False, "error": "csrf_failed"}), 403
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
