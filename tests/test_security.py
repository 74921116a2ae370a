from datetime import datetime, timedelta, timezone

import jwt
import pytest

from utils.security import (
    ACCESS,
    REFRESH,
    TokenSettings,
    create_token,
    decode_token,
    hash_password,
    verify_password,
)

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert hashed.startswith("$argon2")

    def test_verify_exact_plaintext(self):
        assert verify_password("s3cret-pass", hash_password("s3cret-pass")) is True

    def test_verify_rejects_other_strings(self):
        hashed = hash_password("s3cret-pass")
        assert verify_password("s3cret-pas", hashed) is False
        assert verify_password("S3CRET-PASS", hashed) is False
        assert verify_password("", hashed) is False

    def test_verify_rejects_the_hash_itself(self):
        hashed = hash_password("s3cret-pass")
        assert verify_password(hashed, hashed) is False

    def test_verify_with_malformed_hash(self):
        assert verify_password("s3cret-pass", "not-an-argon2-hash") is False


class TestTokenSettings:
    def test_rejects_shared_secret(self):
        with pytest.raises(ValueError):
            TokenSettings("same-key", timedelta(minutes=5), "same-key", timedelta(days=1))

    def test_rejects_missing_secret(self):
        with pytest.raises(ValueError):
            TokenSettings(None, timedelta(minutes=5), "refresh-key", timedelta(days=1))


class TestTokens:
    def test_round_trip(self, settings):
        token = create_token(settings, ACCESS, "user-1", NOW, claims={"username": "alice"})
        decoded = decode_token(settings, token, ACCESS, NOW + timedelta(minutes=1))
        assert decoded["sub"] == "user-1"
        assert decoded["type"] == "access"
        assert decoded["username"] == "alice"
        assert decoded["exp"] == int((NOW + settings.access_ttl).timestamp())

    def test_tokens_minted_together_differ(self, settings):
        assert create_token(settings, REFRESH, "user-1", NOW) != create_token(settings, REFRESH, "user-1", NOW)

    def test_expired_token(self, settings):
        token = create_token(settings, ACCESS, "user-1", NOW)
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(settings, token, ACCESS, NOW + settings.access_ttl)

    def test_expired_token_with_valid_signature(self, settings):
        token = jwt.encode(
            {"sub": "user-1", "type": "access", "iss": settings.issuer,
             "exp": int((NOW - timedelta(seconds=1)).timestamp())},
            settings.access_secret,
            algorithm="HS256",
        )
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(settings, token, ACCESS, NOW)

    def test_access_token_is_not_a_refresh_token(self, settings):
        token = create_token(settings, ACCESS, "user-1", NOW)
        with pytest.raises(jwt.InvalidTokenError):
            decode_token(settings, token, REFRESH, NOW)

    def test_wrong_type_claim_with_right_key(self, settings):
        token = jwt.encode(
            {"sub": "user-1", "type": "access", "iss": settings.issuer,
             "exp": int((NOW + timedelta(hours=1)).timestamp())},
            settings.refresh_secret,
            algorithm="HS256",
        )
        with pytest.raises(jwt.InvalidTokenError, match="Wrong token type"):
            decode_token(settings, token, REFRESH, NOW)

    def test_tampered_token(self, settings):
        token = create_token(settings, ACCESS, "user-1", NOW)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        with pytest.raises(jwt.InvalidTokenError):
            decode_token(settings, tampered, ACCESS, NOW)

    def test_missing_subject(self, settings):
        token = jwt.encode(
            {"type": "access", "iss": settings.issuer,
             "exp": int((NOW + timedelta(hours=1)).timestamp())},
            settings.access_secret,
            algorithm="HS256",
        )
        with pytest.raises(jwt.MissingRequiredClaimError):
            decode_token(settings, token, ACCESS, NOW)

    def test_malformed_token(self, settings):
        with pytest.raises(jwt.InvalidTokenError):
            decode_token(settings, "not.a.jwt", ACCESS, NOW)
