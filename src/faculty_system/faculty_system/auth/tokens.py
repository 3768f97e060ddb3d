from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from ..core.constants import DEFAULT_ACCESS_TOKEN_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError


@dataclass(frozen=True)
class Identity:
    """Verified caller: who they are and which role they act as."""

    user_id: int
    role: Role


class TokenService:
    """Issues and verifies JWT access tokens."""

    def __init__(self, secret: str, *, algorithm: str = "HS256", access_minutes: int = DEFAULT_ACCESS_TOKEN_MINUTES):
        if not secret:
            raise ValueError("JWT secret must be configured")
        self._secret = secret
        self._algorithm = algorithm
        self._access_minutes = int(access_minutes)

    def issue_access_token(self, *, user_id: int, role: Role, email: str | None = None, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "role": role.value,
            "iat": now,
            "exp": now + timedelta(minutes=self._access_minutes),
        }
        if email:
            payload["email"] = email
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        try:
            return Identity(user_id=int(payload["sub"]), role=Role(str(payload.get("role", "")).lower()))
        except (KeyError, ValueError):
            raise AuthenticationError("Invalid token")

    @property
    def access_minutes(self) -> int:
        return self._access_minutes
