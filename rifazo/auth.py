"""Flask-Login integration.

The browser session stores the user id (Flask-Login) and the single active
``session_id`` issued at login. A login elsewhere issues a new id, so the
loader rejects the older session on its next request.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable

from flask import Flask, current_app, session
from flask_login import LoginManager, UserMixin, current_user, login_user, logout_user

from rifazo.errors import ForbiddenError, UnauthorizedError
from rifazo.models.user import ManagedUser
from rifazo.services.auth_service import AuthService

logger = logging.getLogger(__name__)

SESSION_KEY = "rifazo_session_id"

login_manager = LoginManager()


class SessionUser(UserMixin):
    """Signed-in user as seen by Flask-Login."""

    def __init__(self, user: ManagedUser) -> None:
        self.user = user
        self.id = user.id
        self.username = user.username
        self.role = user.role

    def get_id(self) -> str:
        return str(self.id)


def get_auth_service() -> AuthService:
    cfg = current_app.config
    return AuthService(
        max_failed_attempts=int(cfg.get("MAX_FAILED_LOGIN_ATTEMPTS", 5)),
        lockout_minutes=int(cfg.get("LOCKOUT_MINUTES", 15)),
    )


def init_login_manager(app: Flask) -> None:
    login_manager.init_app(app)
    login_manager.login_view = "web.login"

    @login_manager.user_loader
    def load_user(user_id: str) -> SessionUser | None:
        user = get_auth_service().validate_session(user_id, session.get(SESSION_KEY))
        return SessionUser(user) if user is not None else None

    @login_manager.unauthorized_handler
    def _unauthorized():  # type: ignore[no-untyped-def]
        raise UnauthorizedError()


def start_session(user: ManagedUser) -> None:
    login_user(SessionUser(user))
    session[SESSION_KEY] = user.session_id


def end_session() -> None:
    logout_user()
    session.pop(SESSION_KEY, None)


def signed_in_user() -> ManagedUser | None:
    if current_user.is_authenticated:
        return current_user.user
    return None


def require_user() -> ManagedUser:
    user = signed_in_user()
    if user is None:
        raise UnauthorizedError()
    return user


def login_required(view: Callable[..., Any]) -> Callable[..., Any]:
    """JSON API guard: 401 envelope when nobody is signed in."""

    @wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        require_user()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(view: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            user = require_user()
            if user.role not in roles:
                logger.info("User '%s' (role=%s) denied access to %s", user.username, user.role, view.__name__)
                raise ForbiddenError(message="You do not have permission to perform this action")
            return view(*args, **kwargs)

        return wrapper

    return decorator
