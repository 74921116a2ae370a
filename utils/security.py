"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT, with one signing key per token type
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

ACCESS = "access"
REFRESH = "refresh"

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    if not password or not password_hash:
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


@dataclass(frozen=True)
class TokenSettings:
    """Signing keys and lifetimes for access and refresh tokens."""

    access_secret: str
    access_ttl: timedelta
    refresh_secret: str
    refresh_ttl: timedelta
    algorithm: str = "HS256"
    issuer: str = "videotube-api"

    def __post_init__(self):
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Access and refresh signing keys must both be set")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct signing keys")

    def secret_for(self, token_type: str) -> str:
        if token_type == ACCESS:
            return self.access_secret
        if token_type == REFRESH:
            return self.refresh_secret
        raise ValueError(f"Unknown token type: {token_type}")

    def ttl_for(self, token_type: str) -> timedelta:
        return self.access_ttl if token_type == ACCESS else self.refresh_ttl


def create_token(
    settings: TokenSettings,
    token_type: str,
    subject: str,
    now: datetime,
    claims: Dict[str, Any] | None = None,
) -> str:
    """
    Sign a token of the given type for subject. Every token carries its own
    jti, so two tokens minted in the same second still differ.
    """
    exp = now + settings.ttl_for(token_type)
    payload = dict(claims or {})
    payload.update(
        {
            "iss": settings.issuer,
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "type": token_type,
            "jti": generate_jti(),
        }
    )
    return jwt.encode(payload, settings.secret_for(token_type), algorithm=settings.algorithm)


def decode_token(settings: TokenSettings, token: str, token_type: str, now: datetime) -> Dict[str, Any]:
    """
    Decode and validate a JWT against the key for token_type.
    Expiry is checked against now rather than the wall clock.
    Raises jwt.InvalidTokenError (or a subclass) on any failure.
    """
    decoded = jwt.decode(
        token,
        settings.secret_for(token_type),
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        options={
            "require": ["sub", "exp", "type"],
            "verify_exp": False,
            "verify_iat": False,
        },
    )

    try:
        exp = int(decoded["exp"])
    except (TypeError, ValueError):
        raise jwt.InvalidTokenError("Expiration Time claim (exp) must be an integer")
    if exp <= int(now.timestamp()):
        raise jwt.ExpiredSignatureError("Signature has expired")

    if decoded.get("type") != token_type:
        raise jwt.InvalidTokenError("Wrong token type")
    return decoded
