"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/logout
- POST /auth/refresh-token
- POST /auth/change-password

Tokens travel as HttpOnly cookies (accessToken / refreshToken) and are also
returned in the body for clients without cookie support.
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, g, current_app

from api.responses import api_response
from models.schemas.user import (
    UserCreateSchema,
    UserOutSchema,
    UserLoginSchema,
    PasswordChangeSchema,
)
from utils.decorators import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    extract_refresh_token,
    get_session_manager,
    jwt_required,
)
from utils.exceptions import UserAlreadyExists
from utils.session_manager import TokenPair

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/auth")

user_create_schema = UserCreateSchema()
user_out_schema = UserOutSchema()
user_login_schema = UserLoginSchema()
password_change_schema = PasswordChangeSchema()


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": current_app.config.get("COOKIE_SECURE", True),
        "samesite": current_app.config.get("COOKIE_SAMESITE", "Lax"),
    }


def _set_token_cookies(response, pair: TokenPair):
    options = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE, pair.access_token,
        max_age=int(current_app.config["ACCESS_TOKEN_EXPIRES"].total_seconds()), **options
    )
    response.set_cookie(
        REFRESH_COOKIE, pair.refresh_token,
        max_age=int(current_app.config["REFRESH_TOKEN_EXPIRES"].total_seconds()), **options
    )
    return response


def _clear_token_cookies(response):
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            username: { type: string }
            email: { type: string }
            fullName: { type: string }
            password: { type: string }
            avatar: { type: string }
            coverImage: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Username or email already registered
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    store = get_session_manager().store
    if store.find_by_identity(username=data["username"], email=data["email"]):
        raise UserAlreadyExists()

    user = store.create(
        username=data["username"],
        email=data["email"],
        full_name=data["full_name"],
        password=data["password"],
        avatar=data.get("avatar"),
        cover_image=data.get("cover_image"),
    )
    logger.info("Registered user %s", user.id)
    return api_response(user_out_schema.dump(store.find_by_id(user.id)), "User created", 201)


@bp.post("/login")
def login():
    """
    Login: sets accessToken/refreshToken cookies and returns both tokens
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             username: { type: string }
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Missing fields or incorrect password
      404:
        description: User not found
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    user, pair = get_session_manager().login(
        data.get("password"), username=data.get("username"), email=data.get("email")
    )

    response, status = api_response(
        {
            "user": user_out_schema.dump(user),
            "accessToken": pair.access_token,
            "refreshToken": pair.refresh_token,
        },
        "User logged in successfully",
    )
    return _set_token_cookies(response, pair), status


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: revokes the stored refresh token and clears both cookies
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    get_session_manager().logout(g.current_user.id)
    response, status = api_response(None, "User logged out successfully")
    return _clear_token_cookies(response), status


@bp.post("/refresh-token")
def refresh_token():
    """
    Exchange the current refresh token for a new token pair (rotation)
    The token is read from the refreshToken cookie, else from the body.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: New tokens issued
      401:
        description: Missing, invalid or expired refresh token
      403:
        description: Refresh token has been superseded or revoked
    """
    pair = get_session_manager().refresh(extract_refresh_token(request))
    response, status = api_response(
        {"accessToken": pair.access_token, "refreshToken": pair.refresh_token},
        "Access token refreshed",
    )
    return _set_token_cookies(response, pair), status


@bp.post("/change-password")
@jwt_required()
def change_password():
    """
    Change the current user's password; the session is rotated
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             oldPassword: { type: string }
             newPassword: { type: string }
    responses:
      200:
        description: Password changed, new tokens issued
      400:
        description: Missing fields or invalid old password
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = password_change_schema.load(payload)

    pair = get_session_manager().change_password(
        g.current_user.id, data.get("old_password"), data.get("new_password")
    )
    response, status = api_response(
        {"accessToken": pair.access_token, "refreshToken": pair.refresh_token},
        "Password changed successfully",
    )
    return _set_token_cookies(response, pair), status
