"""Session-token helpers: signed JWTs carried in an http-only cookie."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, Request, Response
import jwt

from trivia_app.config import Settings


class TokenCodec:
    """Issues and verifies the tokens identifying a logged-in user."""

    def __init__(self, settings: Settings) -> None:
        self._secret = settings.jwt_secret.get_secret_value()
        self._algorithm = settings.jwt_algorithm
        self._ttl = timedelta(days=settings.token_ttl_days)
        self._cookie_name = settings.cookie_name
        self._cookie_secure = settings.cookie_secure

    def sign(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {"uid": user_id, "iat": now, "exp": now + self._ttl}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> str | None:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.InvalidTokenError:
            return None
        user_id = payload.get("uid")
        return user_id if isinstance(user_id, str) and user_id else None

    def set_cookie(self, response: Response, user_id: str) -> None:
        response.set_cookie(
            key=self._cookie_name,
            value=self.sign(user_id),
            max_age=int(self._ttl.total_seconds()),
            samesite="lax",
            httponly=True,
            secure=self._cookie_secure,
        )

    def clear_cookie(self, response: Response) -> None:
        response.delete_cookie(key=self._cookie_name, samesite="lax", httponly=True)

    def current_user_id(self, request: Request) -> str:
        """Return the authenticated user id or raise 401."""
        token = request.cookies.get(self._cookie_name)
        user_id = self.verify(token) if token else None
        if user_id is None:
            raise HTTPException(status_code=401, detail="unauthenticated")
        return user_id
