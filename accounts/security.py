"""Authentication and authorization helpers for the account API."""
from __future__ import annotations

from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import MISSING_ADMIN, MISSING_AUTHORIZATION, ForbiddenError, UnauthorizedError
from .models import Actor
from .tokens import InvalidTokenError, TokenService


def can_act_on(actor: Actor, target_id: str) -> bool:
    """Return ``True`` when ``actor`` may modify the account ``target_id``."""

    return actor.is_adm or actor.id == target_id


def require_admin(actor: Actor) -> Actor:
    if not actor.is_adm:
        raise ForbiddenError(MISSING_ADMIN)
    return actor


class BearerAuth:
    """Resolve the calling :class:`Actor` from an ``Authorization: Bearer`` header."""

    def __init__(self, tokens: TokenService):
        self._tokens = tokens
        self._bearer = HTTPBearer(auto_error=False)

    async def __call__(self, request: Request) -> Actor:
        credentials: HTTPAuthorizationCredentials | None = await self._bearer(request)  # type: ignore[assignment]
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise UnauthorizedError(MISSING_AUTHORIZATION)

        try:
            claims = self._tokens.verify(credentials.credentials)
        except InvalidTokenError as exc:
            raise UnauthorizedError(MISSING_AUTHORIZATION) from exc

        return Actor(id=claims.subject, is_adm=claims.is_adm)


__all__ = ["BearerAuth", "can_act_on", "require_admin"]
