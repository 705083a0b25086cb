"""Session-bound CSRF tokens for the admin forms and JSON API."""

from __future__ import annotations

import secrets

from flask import current_app, request, session

CSRF_TOKEN_SESSION_KEY = "_csrf_token"
CSRF_FORM_FIELD = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def generate_csrf_token() -> str:
    """Return the token bound to this browser session, minting one if needed."""
    token = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token:
        token = secrets.token_hex(32)
        session[CSRF_TOKEN_SESSION_KEY] = token
    return token


def csrf_check_passes() -> bool:
    """Check the submitted token (form field or header) for the current request.

    Always true when ``WTF_CSRF_ENABLED`` is off.
    """
    if not current_app.config.get("WTF_CSRF_ENABLED", True):
        return True
    submitted = request.form.get(CSRF_FORM_FIELD) or request.headers.get(CSRF_HEADER) or ""
    expected = session.get(CSRF_TOKEN_SESSION_KEY, "")
    if not submitted or not expected:
        return False
    return secrets.compare_digest(submitted, expected)
