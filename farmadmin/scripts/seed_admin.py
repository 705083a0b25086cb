"""Create (or promote) an administrator account.

Usage:
    flask --app farmadmin.wsgi seed-admin --email admin@example.com --password secret123
    python -m farmadmin.scripts.seed_admin --email admin@example.com --password secret123
"""

from __future__ import annotations

import click
from flask.cli import with_appcontext
from sqlalchemy import func

from farmadmin.core.auth.auth_service import hash_password
from farmadmin.core.auth.models import AdminUser
from farmadmin.core.users.models import User
from farmadmin.extensions import db


def seed_admin_user(email: str, password: str, full_name: str | None = None) -> User:
    normalized = email.strip().lower()
    user = User.query.filter(func.lower(User.email) == normalized).first()
    if not user:
        user = User(
            email=normalized,
            full_name=full_name or "Admin",
            password_hash=hash_password(password),
        )
        db.session.add(user)
        db.session.flush()
    if not AdminUser.query.filter_by(user_id=user.id).first():
        db.session.add(AdminUser(user_id=user.id))
    db.session.commit()
    return user


@click.command("seed-admin")
@click.option("--email", required=True, help="Admin email")
@click.option("--password", required=True, help="Admin password")
@click.option("--full-name", default="Admin", help="Admin display name")
@with_appcontext
def seed_admin_command(email: str, password: str, full_name: str) -> None:
    """Create an admin user, or grant admin to an existing one."""
    user = seed_admin_user(email, password, full_name)
    click.echo(f"Seeded admin user {user.email}")


@click.command()
@click.option("--email", required=True, help="Admin email")
@click.option("--password", required=True, help="Admin password")
@click.option("--full-name", default="Admin", help="Admin display name")
def main(email: str, password: str, full_name: str) -> None:
    from farmadmin import create_app

    app = create_app()
    with app.app_context():
        user = seed_admin_user(email, password, full_name)
        click.echo(f"Seeded admin user {user.email}")


if __name__ == "__main__":
    main()
