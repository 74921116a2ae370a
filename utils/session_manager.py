"""
Session lifecycle: issue, verify, rotate and revoke access/refresh token pairs.

A refresh token is accepted only if its signature and expiry verify AND it
equals the value currently stored on the user. Overwriting or clearing the
stored value (login, rotation, password change, logout) therefore revokes
every refresh token issued before, expired or not.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Tuple

import jwt

from models.user import User
from utils.exceptions import (
    InvalidCredential,
    InvalidRefreshToken,
    MissingRefreshToken,
    PrincipalNotFound,
    RefreshTokenMismatch,
    Unauthenticated,
    ValidationError,
)
from utils.security import ACCESS, REFRESH, TokenSettings, create_token, decode_token

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class SessionManager:
    def __init__(self, store, settings: TokenSettings,
                 clock: Callable[[], datetime] | None = None,
                 uniform_login_errors: bool = False):
        self.store = store
        self.settings = settings
        self.clock = clock or utcnow
        self.uniform_login_errors = uniform_login_errors

    def issue_tokens(self, user_id: str) -> TokenPair:
        """
        Mint a fresh pair for user_id and persist the refresh token, replacing
        whatever was stored: one active session per user.
        """
        user = self.store.find_by_id(user_id)
        if user is None:
            # The user vanished between authentication and minting
            raise PrincipalNotFound(
                "Something went wrong while generating access and refresh tokens",
                status_code=500,
            )

        now = self.clock()
        access_token = create_token(
            self.settings, ACCESS, user.id, now,
            claims={"username": user.username, "email": user.email, "full_name": user.full_name},
        )
        refresh_token = create_token(self.settings, REFRESH, user.id, now)
        self.store.persist_refresh_token(user.id, refresh_token)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def authenticate(self, token: str | None) -> User:
        """Resolve an access token to its user, without secret fields."""
        if not token:
            raise Unauthenticated()
        try:
            payload = decode_token(self.settings, token, ACCESS, self.clock())
        except jwt.InvalidTokenError as exc:
            logger.warning("Rejected access token: %s", exc)
            raise InvalidCredential("Invalid or expired access token") from exc

        user = self.store.find_by_id(payload["sub"])
        if user is None:
            raise PrincipalNotFound("Invalid access token: user no longer exists")
        return user

    def login(self, password: str | None, username: str | None = None,
              email: str | None = None) -> Tuple[User, TokenPair]:
        username = username.strip() if username else None
        email = email.strip() if email else None
        if not username and not email:
            raise ValidationError("Username or email is required")
        if not password:
            raise ValidationError("Password is required")

        user = self.store.find_by_identity(username=username, email=email)
        if user is None:
            if self.uniform_login_errors:
                raise InvalidCredential()
            raise PrincipalNotFound()

        if not self.store.verify_secret(user, password):
            logger.warning("Failed login for user %s", user.id)
            if self.uniform_login_errors:
                raise InvalidCredential()
            raise InvalidCredential("Incorrect password", status_code=400)

        pair = self.issue_tokens(user.id)
        logger.info("User %s logged in", user.id)
        return self.store.find_by_id(user.id), pair

    def logout(self, user_id: str) -> None:
        self.store.persist_refresh_token(user_id, None)
        logger.info("User %s logged out", user_id)

    def refresh(self, token: str | None) -> TokenPair:
        """Exchange the current refresh token for a new pair (rotation)."""
        if not token:
            raise MissingRefreshToken()
        try:
            payload = decode_token(self.settings, token, REFRESH, self.clock())
        except jwt.InvalidTokenError as exc:
            raise InvalidRefreshToken() from exc

        user = self.store.find_by_id(payload["sub"], with_secrets=True)
        if user is None:
            raise PrincipalNotFound("User not found. Please log in again.")

        if user.refresh_token != token:
            logger.warning("Refresh token mismatch for user %s", user.id)
            raise RefreshTokenMismatch()

        pair = self.issue_tokens(user.id)
        logger.info("Rotated refresh token for user %s", user.id)
        return pair

    def change_password(self, user_id: str, old_password: str | None,
                        new_password: str | None) -> TokenPair:
        """
        Replace the user's password and rotate the session, so refresh tokens
        issued under the old password stop working.
        """
        if not old_password or not new_password:
            raise ValidationError("Old and new password are required")

        user = self.store.find_by_id(user_id, with_secrets=True)
        if user is None:
            raise PrincipalNotFound()
        if not self.store.verify_secret(user, old_password):
            raise InvalidCredential("Invalid old password", status_code=400)

        self.store.persist_secret(user.id, new_password)
        logger.info("Password changed for user %s", user.id)
        return self.issue_tokens(user.id)
