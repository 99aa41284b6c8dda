"""Signed bearer tokens carrying the account identifier and admin flag."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

DEFAULT_TOKEN_TTL = timedelta(hours=24)
_ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Raised when a token is malformed, tampered with, or expired."""


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    is_adm: bool


class TokenService:
    """Issue and verify HS256 JSON Web Tokens signed with a shared secret."""

    def __init__(
        self,
        secret: str,
        *,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not secret:
            raise ValueError("A token signing secret must be provided")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, subject_id: str, is_adm: bool) -> str:
        issued_at = self._clock()
        payload = {
            "sub": subject_id,
            "isAdm": bool(is_adm),
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"require": ["sub", "exp"], "verify_iat": False},
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("Token subject is missing")
        return TokenClaims(subject=subject, is_adm=payload.get("isAdm") is True)


__all__ = ["DEFAULT_TOKEN_TTL", "InvalidTokenError", "TokenClaims", "TokenService"]
