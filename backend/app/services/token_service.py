"""Signed, time-limited bearer tokens carrying an admin identity."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.utils.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(days=7)


@dataclass(frozen=True)
class AdminIdentity:
    id: str
    email: str


class TokenService:
    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TTL,
    ) -> None:
        if not secret:
            raise ValueError("JWT secret is not configured")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    def issue(self, identity: AdminIdentity) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "id": identity.id,
            "email": identity.email,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> AdminIdentity:
        """Decode ``token`` and return its identity.

        Raises InvalidTokenError when the signature does not match, the token
        is malformed or expired, or the identity claims are missing.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require_exp": True},
            )
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        admin_id = claims.get("id")
        email = claims.get("email")
        if not isinstance(admin_id, str) or not isinstance(email, str):
            raise InvalidTokenError("Token is missing identity claims")
        return AdminIdentity(id=admin_id, email=email)
