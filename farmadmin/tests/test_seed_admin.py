from __future__ import annotations

import pytest

from farmadmin.core.auth.auth_service import authenticate_admin
from farmadmin.core.auth.models import AdminUser
from farmadmin.core.users.models import User
from farmadmin.scripts.seed_admin import seed_admin_command, seed_admin_user

pytestmark = pytest.mark.integration


def test_seed_creates_admin(app):
    user = seed_admin_user(" Root@Example.com ", "hunter22", "Root")

    assert user.email == "root@example.com"
    assert authenticate_admin("root@example.com", "hunter22")[1] is True


def test_seed_promotes_existing_user_once(app, make_user):
    existing = make_user("farmer@example.com")

    seed_admin_user("farmer@example.com", "ignored")
    seed_admin_user("farmer@example.com", "ignored")

    assert User.query.count() == 1
    assert AdminUser.query.filter_by(user_id=existing.id).count() == 1
    # password of an existing account is left alone
    assert authenticate_admin("farmer@example.com", "secret123")[1] is True


def test_seed_admin_cli(app):
    runner = app.test_cli_runner()

    result = runner.invoke(
        seed_admin_command, ["--email", "cli@example.com", "--password", "pw123456"]
    )

    assert result.exit_code == 0
    assert "Seeded admin user cli@example.com" in result.output
    assert User.query.filter_by(email="cli@example.com").one().full_name == "Admin"
