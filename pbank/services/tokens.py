"""
Stateless session tokens.

Tokens are HS256 JSON Web Tokens carrying the user's id (``sub``), username,
issue time and expiry. Nothing is stored server side, so a token stays valid
until ``exp`` even after the client discards it.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable
from uuid import UUID

import jwt
from dateutil.tz import tzutc

from pbank.errors import TokenExpired, TokenInvalid


def utc_now() -> datetime:
    return datetime.now(tzutc())


@dataclass(frozen=True)
class UserIdentity:
    user_id: UUID
    username: str


class TokenIssuer:
    def __init__(
            self,
            secret: str,
            algorithm: str = "HS256",
            ttl: timedelta = timedelta(hours=1),
            now: Callable[[], datetime] = utc_now,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._now = now

    def issue(self, user) -> str:
        issued_at = self._now()
        claims = {
            "sub": str(user.id),
            "username": user.username,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def validate(self, token: str) -> UserIdentity:
        """
        Check signature, required claims and expiry.

        Expiry is checked against the issuer's clock rather than PyJWT's so
        that it can be driven from tests.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["sub", "exp"]},
            )
        except jwt.InvalidTokenError as exc:
            raise TokenInvalid(str(exc)) from exc

        try:
            expires_at = int(claims["exp"])
            user_id = UUID(claims["sub"])
        except (TypeError, ValueError) as exc:
            raise TokenInvalid("Malformed claims") from exc

        if self._now().timestamp() >= expires_at:
            raise TokenExpired("Token has expired")

        return UserIdentity(user_id=user_id, username=claims.get("username", ""))
