"""Session backend for the admin console.

Identity comes from the Flask-Login cookie session; admin membership from
the ``admin_user`` table. Database failures surface as ``AuthBackendError``.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from flask import session
from flask_login import current_user, login_user, logout_user
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from farmadmin.core.auth.csrf import CSRF_TOKEN_SESSION_KEY
from farmadmin.core.auth.models import AdminUser
from farmadmin.core.auth.schemas import AdminSession
from farmadmin.core.gate.errors import AuthBackendError
from farmadmin.core.users.models import User
from farmadmin.extensions import bcrypt

logger = logging.getLogger(__name__)


def hash_password(plain_password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return bcrypt.generate_password_hash(plain_password).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Validate a plaintext password against a stored hash."""
    try:
        return bcrypt.check_password_hash(hashed_password, plain_password)
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def _admin_row(user_id: int) -> Optional[AdminUser]:
    return AdminUser.query.filter_by(user_id=user_id).first()


def get_current_session() -> Optional[AdminSession]:
    """Return the admin session for this request, or None.

    Anonymous callers, deactivated accounts and users without an
    ``admin_user`` row all count as "no session".
    """
    try:
        # current_user resolves through the user_loader, which hits the database.
        if not current_user.is_authenticated or not current_user.is_active:
            return None
        admin = _admin_row(current_user.id)
    except SQLAlchemyError as exc:
        raise AuthBackendError("session lookup failed") from exc
    if admin is None:
        return None
    return AdminSession(
        user_id=current_user.id,
        email=current_user.email,
        admin_since=admin.admin_since,
    )


def authenticate_admin(email: str, password: str) -> Tuple[Optional[User], bool]:
    """Check credentials; return ``(user, is_admin)``.

    ``user`` is None when the credentials are wrong or the account is inactive.
    """
    normalized = email.strip().lower()
    try:
        user = User.query.filter(func.lower(User.email) == normalized).first()
        if not user or not user.is_active or not verify_password(password, user.password_hash):
            return None, False
        return user, _admin_row(user.id) is not None
    except SQLAlchemyError as exc:
        raise AuthBackendError("credential check failed") from exc


def sign_in(user: User) -> None:
    """Start a fresh cookie session for ``user``, dropping stale keys."""
    csrf_token = session.get(CSRF_TOKEN_SESSION_KEY)
    session.clear()
    if csrf_token:
        session[CSRF_TOKEN_SESSION_KEY] = csrf_token
    login_user(user)
    logger.info("Admin sign-in uid=%s", user.id)


def sign_out() -> None:
    if current_user.is_authenticated:
        logger.info("Admin sign-out uid=%s", current_user.id)
    logout_user()
    session.clear()
