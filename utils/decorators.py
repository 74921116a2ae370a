from __future__ import annotations
from functools import wraps
from flask import request, g, current_app
from utils.exceptions import Unauthenticated

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def get_session_manager():
    """The SessionManager created by the application factory."""
    return current_app.extensions["session_manager"]


def extract_access_token(req) -> str:
    """Access token from the cookie, else from 'Authorization: Bearer <token>'."""
    token = req.cookies.get(ACCESS_COOKIE)
    if not token:
        auth = req.headers.get("Authorization", "")
        if auth.startswith("Bearer "):
            token = auth.split(" ", 1)[1].strip()
    if not token:
        raise Unauthenticated()
    return token


def extract_refresh_token(req) -> str | None:
    """Refresh token from the cookie, else from the body field 'refreshToken' (JSON or form)."""
    token = req.cookies.get(REFRESH_COOKIE)
    if token:
        return token
    payload = req.get_json(silent=True) or {}
    token = payload.get("refreshToken") if isinstance(payload, dict) else None
    if not token:
        token = req.form.get("refreshToken")
    return token if isinstance(token, str) and token else None


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = extract_access_token(request)
            # Failures are ApiError subclasses, rendered by api.errors
            g.current_user = get_session_manager().authenticate(token)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
