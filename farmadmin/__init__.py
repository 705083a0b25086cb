"""Farm admin console application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from flask import Flask, redirect, url_for

from farmadmin.config import config_by_name
from farmadmin.core.auth.csrf import generate_csrf_token
from farmadmin.core.gate.errors import AuthBackendError, BackendError
from farmadmin.extensions import init_extensions, login_manager


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the farm admin Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(
        __name__,
        instance_path=str(instance_root),
        instance_relative_config=True,
        template_folder=str(Path(__file__).parent / "templates"),
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and ":memory:" not in db_uri:
        db_path = db_uri.replace("sqlite:///", "", 1)
        abs_path = Path(db_path) if Path(db_path).is_absolute() else project_root / db_path
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    init_extensions(app)
    _register_models()
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/")
    def index():
        return redirect(url_for("admin_pages.dashboard"))

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    from farmadmin.scripts.seed_admin import seed_admin_command

    app.cli.add_command(seed_admin_command)

    return app


def _register_models() -> None:
    """Import model modules so metadata is complete for create_all/migrations."""
    from farmadmin.core.auth import models as _auth_models  # noqa: F401
    from farmadmin.core.users import models as _user_models  # noqa: F401
    from farmadmin.domains.admin import models as _admin_models  # noqa: F401
    from farmadmin.domains.audit import models as _audit_models  # noqa: F401
    from farmadmin.domains.farms.models import farm_models as _farm_models  # noqa: F401
    from farmadmin.domains.support import models as _support_models  # noqa: F401


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from farmadmin.core.auth.controllers import admin_auth_bp
    from farmadmin.domains.admin.controllers.admin_api import admin_api_bp
    from farmadmin.domains.admin.controllers.admin_pages import admin_pages_bp

    app.register_blueprint(admin_auth_bp, url_prefix="/admin")
    app.register_blueprint(admin_pages_bp, url_prefix="/admin")
    app.register_blueprint(admin_api_bp, url_prefix="/api/admin")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses; backend outages surface as 503."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(BackendError)
    def _backend_error(exc: BackendError):
        app.logger.exception("Backend failure: %s", exc)
        code = (
            "auth_backend_unavailable"
            if isinstance(exc, AuthBackendError)
            else "data_backend_unavailable"
        )
        return {"ok": False, "error": code}, 503

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """Login manager and template helpers."""

    @login_manager.user_loader
    def _load_user(user_id: str):
        from farmadmin.core.users.models import User
        from farmadmin.extensions import db

        return db.session.get(User, int(user_id)) if user_id else None

    @app.context_processor
    def inject_csrf_token():
        return {"csrf_token": generate_csrf_token}
