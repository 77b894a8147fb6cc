"""Service for player registration and credential checks."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from uuid import uuid4

import bcrypt

from trivia_app.core.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from trivia_app.core.models import User
from trivia_app.core.persistence import USERS, DocumentStore

logger = logging.getLogger(__name__)

_BCRYPT_MAX_PASSWORD_BYTES = 72


class UserAccounts:
    """Creates users and verifies their passwords."""

    def __init__(self, store: DocumentStore, bcrypt_rounds: int = 12) -> None:
        self._store = store
        self._bcrypt_rounds = bcrypt_rounds

    def signup(self, email: str, password: str, display_name: str) -> User:
        email = (email or "").strip().lower()
        display_name = (display_name or "").strip()
        if not email or not password or not display_name:
            raise ValidationError("Missing required fields")
        if len(password.encode("utf-8")) > _BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError("Password must be at most 72 bytes long.")
        if self.find_by_email(email) is not None:
            raise ConflictError("email already registered")

        user = User(
            id=uuid4().hex,
            email=email,
            password_hash=self._hash_password(password),
            display_name=display_name,
            created_at=datetime.now(timezone.utc),
        )
        self._store.put(USERS, user.id, user.to_document())
        logger.info("Registered user %s", user.id)
        return user

    def authenticate(self, email: str, password: str) -> User:
        email = (email or "").strip().lower()
        if not email or not password:
            raise ValidationError("Missing required fields")
        user = self.find_by_email(email)
        if user is None or not self._check_password(password, user.password_hash):
            raise AuthenticationError("invalid credentials")
        return user

    def get(self, user_id: str) -> User:
        document = self._store.get(USERS, user_id)
        if document is None:
            raise NotFoundError("user not found")
        return User.from_document(document)

    def find_by_email(self, email: str) -> User | None:
        matches = self._store.find(USERS, where=lambda doc: doc["email"] == email, limit=1)
        return User.from_document(matches[0]) if matches else None

    def _hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _check_password(password: str, password_hash: str) -> bool:
        encoded = password.encode("utf-8")
        if len(encoded) > _BCRYPT_MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
