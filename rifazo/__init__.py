"""RIFAZO raffle platform (Flask application package)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from dotenv import load_dotenv
from flask import Flask


def create_app(overrides: dict[str, Any] | None = None) -> Flask:
    """Application factory.

    Args:
        overrides: Config values applied after the environment's config class.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from rifazo.auth import init_login_manager, signed_in_user
    from rifazo.config import get_config
    from rifazo.db import init_db
    from rifazo.error_handlers import register_error_handlers
    from rifazo.logging_config import configure_logging
    from rifazo.routes.activity_logs import activity_logs_bp
    from rifazo.routes.admin_users import admin_users_bp
    from rifazo.routes.auth import auth_bp
    from rifazo.routes.backup import backup_bp
    from rifazo.routes.health import health_bp
    from rifazo.routes.participations import participations_bp
    from rifazo.routes.raffles import raffles_bp
    from rifazo.routes.ratings import ratings_bp
    from rifazo.routes.reference import reference_bp
    from rifazo.routes.results import results_bp
    from rifazo.routes.web import web_bp
    from rifazo.seed import seed_initial_users

    app = Flask(__name__)
    app.config.from_object(get_config())
    if overrides:
        app.config.update(overrides)

    configure_logging(app)
    init_db(app)
    init_login_manager(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(web_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(reference_bp, url_prefix="/api/reference")
    app.register_blueprint(raffles_bp, url_prefix="/api")
    app.register_blueprint(participations_bp, url_prefix="/api")
    app.register_blueprint(results_bp, url_prefix="/api")
    app.register_blueprint(ratings_bp, url_prefix="/api")
    app.register_blueprint(admin_users_bp, url_prefix="/api/admin")
    app.register_blueprint(activity_logs_bp, url_prefix="/api/admin")
    app.register_blueprint(backup_bp, url_prefix="/api/admin")

    @app.context_processor
    def _layout_context() -> dict[str, Any]:
        user = signed_in_user()
        return {
            "current_year": datetime.now(timezone.utc).year,
            "support_whatsapp_number": app.config["SUPPORT_WHATSAPP_NUMBER"],
            "page_loader_delay_ms": int(app.config["PAGE_LOADER_DELAY_MS"]),
            "signed_in_user": user,
            "is_logged_in": user is not None,
        }

    if app.config.get("SEED_INITIAL_USERS"):
        with app.app_context():
            seed_initial_users()

    return app
