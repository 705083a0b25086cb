from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from farmadmin import create_app
from farmadmin.core.auth.auth_service import hash_password
from farmadmin.core.auth.models import AdminUser
from farmadmin.core.users.models import User
from farmadmin.domains.farms.models.farm_models import (
    ROLE_TYPE_OWNER,
    Animal,
    BillingSubscription,
    Farm,
    FarmProfile,
    FarmRole,
)
from farmadmin.extensions import db

ADMIN_PASSWORD = "secret123"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, HTTP)")


@pytest.fixture()
def app():
    """Per-test app bound to a fresh in-memory SQLite database."""
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    def _make(email: str | None = None, *, password: str = ADMIN_PASSWORD, admin: bool = False,
              full_name: str | None = None, is_active: bool = True) -> User:
        user = User(
            email=email or f"user-{uuid4().hex[:8]}@example.com",
            password_hash=hash_password(password),
            full_name=full_name,
            is_active=is_active,
        )
        db.session.add(user)
        db.session.flush()
        if admin:
            db.session.add(AdminUser(user_id=user.id))
        db.session.commit()
        return user

    return _make


@pytest.fixture()
def admin_user(make_user):
    return make_user("admin@example.com", admin=True, full_name="Ada Admin")


def _attach_login(client, user: User) -> None:
    with client.session_transaction() as sess:
        sess["_user_id"] = str(user.id)
        sess["_fresh"] = True


@pytest.fixture()
def login_as(client):
    """Attach a Flask-Login session for a user to the test client."""

    def _login(user: User) -> None:
        _attach_login(client, user)

    return _login


@pytest.fixture()
def admin_client(client, admin_user):
    _attach_login(client, admin_user)
    return client


@pytest.fixture()
def make_farm(app, make_user):
    def _make(name: str | None = None, *, owner: User | None = None, with_owner: bool = True,
              created_at: datetime | None = None, herd_size: int | None = None, animals: int = 0,
              monthly_price: str | None = None, subscription_status: str = "active") -> Farm:
        farm = Farm(name=name or f"Farm {uuid4().hex[:6]}", location="Waikato")
        if created_at is not None:
            farm.created_at = created_at
        db.session.add(farm)
        db.session.flush()
        if herd_size is not None:
            db.session.add(FarmProfile(farm_id=farm.id, herd_size=herd_size, onboarding_completed=True))
        if with_owner:
            owner = owner or make_user(full_name=f"{farm.name} Owner")
            role = FarmRole(user_id=owner.id, farm_id=farm.id, role_type=ROLE_TYPE_OWNER)
            if created_at is not None:
                role.created_at = created_at
            db.session.add(role)
        for idx in range(animals):
            db.session.add(Animal(farm_id=farm.id, tag_number=f"{farm.id}-{idx:04d}"))
        if monthly_price is not None:
            db.session.add(
                BillingSubscription(
                    farm_id=farm.id,
                    plan_type="standard",
                    status=subscription_status,
                    monthly_price=Decimal(monthly_price),
                )
            )
        db.session.commit()
        return farm

    return _make
