"""
UserStore: the credential store the session layer works against.

Wraps DBStorage so the session manager never builds queries itself. Lookups
used for request context exclude the password hash and the stored refresh
token; touching either on such an instance raises instead of lazy-loading.
"""
from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import defer

from models.user import User
from utils.security import hash_password, verify_password

PROFILE_FIELDS = ("full_name", "email", "avatar", "cover_image")


class UserStore:
    def __init__(self, storage):
        self.storage = storage

    def _query(self):
        return self.storage.get_session().query(User)

    def _update(self, user_id: str, values: dict) -> None:
        session = self.storage.get_session()
        try:
            session.query(User).filter(User.id == str(user_id)).update(
                values, synchronize_session=False
            )
        except SQLAlchemyError:
            session.rollback()
            raise
        self.storage.save()

    def find_by_identity(self, username: str | None = None, email: str | None = None) -> User | None:
        """Find a user whose username OR email matches (case-insensitive)."""
        conditions = []
        if username:
            conditions.append(User.username == username.strip().lower())
        if email:
            conditions.append(User.email == email.strip().lower())
        if not conditions:
            return None
        return self._query().filter(or_(*conditions)).populate_existing().first()

    def find_by_id(self, user_id: str, with_secrets: bool = False) -> User | None:
        if not user_id:
            return None
        # Always re-read the row; updates below bypass the identity map
        query = self._query().filter(User.id == str(user_id)).populate_existing()
        if with_secrets:
            return query.first()
        return query.options(
            defer(User.password_hash, raiseload=True),
            defer(User.refresh_token, raiseload=True),
        ).first()

    def verify_secret(self, user: User, plaintext: str) -> bool:
        return verify_password(plaintext, user.password_hash)

    def persist_refresh_token(self, user_id: str, token: str | None) -> None:
        """Overwrite the stored refresh token; the last write wins."""
        self._update(user_id, {User.refresh_token: token})

    def persist_secret(self, user_id: str, plaintext: str) -> None:
        self._update(user_id, {User.password_hash: hash_password(plaintext)})

    def create(self, username: str, email: str, full_name: str, password: str,
               avatar: str | None = None, cover_image: str | None = None) -> User:
        user = User(
            username=username.strip().lower(),
            email=email.strip().lower(),
            full_name=full_name.strip(),
            password_hash=hash_password(password),
            avatar=avatar,
            cover_image=cover_image,
        )
        self.storage.new(user)
        self.storage.save()
        return user

    def update_profile(self, user_id: str, **fields) -> User | None:
        changes = {k: v for k, v in fields.items() if k in PROFILE_FIELDS and v is not None}
        if "email" in changes:
            changes["email"] = changes["email"].strip().lower()
        if changes:
            self._update(user_id, {getattr(User, k): v for k, v in changes.items()})
        return self.find_by_id(user_id)
