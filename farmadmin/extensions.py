"""Flask extensions shared by the admin console."""

from pathlib import Path

from flask_bcrypt import Bcrypt
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

db = SQLAlchemy(session_options={"expire_on_commit": False})
migrate = Migrate()
login_manager = LoginManager()
bcrypt = Bcrypt()
# Storage, default limits and the on/off switch come from RATELIMIT_* config.
limiter = Limiter(key_func=get_remote_address)


def init_extensions(app) -> None:
    """Bind persistence, cookie sessions, hashing and rate limits to ``app``."""
    db.init_app(app)
    migrate.init_app(app, db, directory=str(MIGRATIONS_DIR))
    login_manager.init_app(app)
    login_manager.login_view = "admin_auth.sign_in_page"
    login_manager.session_protection = app.config.get("SESSION_PROTECTION", "basic")
    bcrypt.init_app(app)
    limiter.init_app(app)
