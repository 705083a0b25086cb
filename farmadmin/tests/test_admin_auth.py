from __future__ import annotations

import pytest

from farmadmin.core.auth.auth_service import authenticate_admin, get_current_session
from farmadmin.core.auth.csrf import CSRF_TOKEN_SESSION_KEY
from farmadmin.core.gate import AuthBackendError
from farmadmin.extensions import db

pytestmark = pytest.mark.integration


def test_sign_in_page_renders_form(client):
    resp = client.get("/admin/auth")

    assert resp.status_code == 200
    assert 'name="password"' in resp.get_data(as_text=True)


def test_signed_in_admin_skips_the_form(admin_client):
    resp = admin_client.get("/admin/auth")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/dashboard")


def test_admin_credentials_sign_in_and_unlock_pages(client, admin_user):
    resp = client.post("/admin/auth", data={"email": "ADMIN@example.com", "password": "secret123"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/dashboard")
    assert client.get("/admin/farms").status_code == 200


def test_sign_in_drops_stale_session_keys(client, admin_user):
    with client.session_transaction() as sess:
        sess["stale"] = "1"

    client.post("/admin/auth", data={"email": "admin@example.com", "password": "secret123"})

    with client.session_transaction() as sess:
        assert "stale" not in sess
        assert sess["_user_id"] == str(admin_user.id)


def test_wrong_password_is_rejected(client, admin_user):
    resp = client.post("/admin/auth", data={"email": "admin@example.com", "password": "nope"})

    assert resp.status_code == 401
    assert "Invalid email or password." in resp.get_data(as_text=True)
    assert client.get("/admin/farms").status_code == 302


def test_non_admin_cannot_sign_in(client, make_user):
    make_user("farmer@example.com")

    resp = client.post("/admin/auth", data={"email": "farmer@example.com", "password": "secret123"})

    assert resp.status_code == 403
    assert "Admin access required." in resp.get_data(as_text=True)
    with client.session_transaction() as sess:
        assert "_user_id" not in sess


def test_missing_fields_are_a_bad_request(client):
    resp = client.post("/admin/auth", data={"email": "admin@example.com"})

    assert resp.status_code == 400


def test_csrf_token_required_when_enabled(app, client, admin_user):
    app.config["WTF_CSRF_ENABLED"] = True

    rejected = client.post("/admin/auth", data={"email": "admin@example.com", "password": "secret123"})
    assert rejected.status_code == 403

    client.get("/admin/auth")
    with client.session_transaction() as sess:
        token = sess[CSRF_TOKEN_SESSION_KEY]
    accepted = client.post(
        "/admin/auth",
        data={"email": "admin@example.com", "password": "secret123", "csrf_token": token},
    )
    assert accepted.status_code == 302


def test_logout_ends_the_session(admin_client):
    assert admin_client.get("/admin/dashboard").status_code == 200

    resp = admin_client.post("/admin/logout")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/auth")
    assert admin_client.get("/admin/dashboard").status_code == 302


def test_authenticate_admin_reports_membership(app, make_user):
    make_user("plain@example.com")
    make_user("boss@example.com", admin=True)

    user, is_admin = authenticate_admin("plain@example.com", "secret123")
    assert user is not None and is_admin is False

    user, is_admin = authenticate_admin(" Boss@Example.com ", "secret123")
    assert user is not None and is_admin is True

    assert authenticate_admin("ghost@example.com", "secret123") == (None, False)


def test_current_session_carries_admin_identity(app, admin_user):
    with app.test_request_context():
        from flask_login import login_user

        login_user(admin_user)
        admin_session = get_current_session()

    assert admin_session.user_id == admin_user.id
    assert admin_session.email == "admin@example.com"
    assert admin_session.admin_since is not None


def test_current_session_is_none_for_anonymous(app):
    with app.test_request_context():
        assert get_current_session() is None


def test_credential_check_on_broken_database_raises_auth_error(app):
    db.drop_all()

    with pytest.raises(AuthBackendError):
        authenticate_admin("admin@example.com", "secret123")
