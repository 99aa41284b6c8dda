"""Account use cases: registration, login, listing, update and deletion."""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from .config import SeedAccount
from .errors import (
    EMAIL_TAKEN,
    MISSING_ADMIN,
    USER_NOT_FOUND,
    WRONG_CREDENTIALS,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from .models import RESERVED_FIELDS, Actor, User, public_view
from .passwords import PasswordHasher
from .security import can_act_on
from .store import UserStore
from .tokens import TokenService

logger = logging.getLogger("accounts.lifecycle")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AccountService:
    """Orchestrates the user store, credential hashing and token issuance."""

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        *,
        clock: Callable[[], datetime] = _now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self._clock = clock
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Registration and login
    # ------------------------------------------------------------------
    def email_registered(self, email: str) -> bool:
        return self.store.find(lambda user: user.email == email) is not None

    async def register(self, data: Mapping[str, object]) -> Dict[str, object]:
        email = str(data["email"])
        if self.email_registered(email):
            raise ConflictError(EMAIL_TAKEN)

        password_hash = await self.hasher.hash_async(str(data["password"]))
        now = self._clock()
        user = User(
            id=self._id_factory(),
            email=email,
            name=str(data["name"]),
            password_hash=password_hash,
            created_on=now,
            updated_on=now,
            is_adm=False,
            profile={key: value for key, value in data.items() if key not in RESERVED_FIELDS},
        )
        try:
            self.store.insert(user)
        except ValueError as exc:
            raise ConflictError(EMAIL_TAKEN) from exc

        logger.info("Registered user %s", user.id)
        return public_view(user)

    async def login(self, email: str, password: str) -> Dict[str, str]:
        user = self.store.find(lambda candidate: candidate.email == email)
        if user is None or not await self.hasher.verify_async(password, user.password_hash):
            logger.warning("Failed login attempt for %s", email)
            raise UnauthorizedError(WRONG_CREDENTIALS)

        logger.info("User %s logged in", user.id)
        return {"token": self.tokens.issue(user.id, user.is_adm)}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list_users(self, name: Optional[str] = None) -> List[Dict[str, object]]:
        if name:
            users = self.store.filter(lambda user: user.name == name)
        else:
            users = self.store.all()
        return [public_view(user) for user in users]

    def get_profile(self, caller_id: str) -> Dict[str, object]:
        user = self.store.get(caller_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return public_view(user)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    async def update_user(self, target_id: str, payload: Mapping[str, object], actor: Actor) -> Dict[str, object]:
        target = self.store.get(target_id)
        if target is None:
            raise NotFoundError(USER_NOT_FOUND)
        if not can_act_on(actor, target_id):
            raise ForbiddenError(MISSING_ADMIN)
        requested_adm = payload.get("isAdm")
        if requested_adm is not None and not isinstance(requested_adm, bool):
            raise ValueError("isAdm must be a boolean")
        if requested_adm is not None and requested_adm != target.is_adm and not actor.is_adm:
            raise ForbiddenError(MISSING_ADMIN)

        password_hash: Optional[str] = None
        if payload.get("password"):
            password_hash = await self.hasher.hash_async(str(payload["password"]))

        with self.store.locked():
            index = self.store.find_index(lambda user: user.id == target_id)
            if index == -1:
                raise NotFoundError(USER_NOT_FOUND)
            current = self.store.at(index)

            changes: Dict[str, object] = {"updated_on": self._clock()}
            if "email" in payload and payload["email"] != current.email:
                email = str(payload["email"])
                if self.email_registered(email):
                    raise ConflictError(EMAIL_TAKEN)
                changes["email"] = email
            if "name" in payload:
                changes["name"] = str(payload["name"])
            if requested_adm is not None:
                changes["is_adm"] = requested_adm
            if password_hash is not None:
                changes["password_hash"] = password_hash
            extras = {key: value for key, value in payload.items() if key not in RESERVED_FIELDS}
            if extras:
                changes["profile"] = {**current.profile, **extras}

            updated = self.store.replace_at(index, replace(current, **changes))

        logger.info("User %s updated by %s", target_id, actor.id)
        return public_view(updated)

    def delete_user(self, target_id: str, actor: Actor) -> None:
        if not can_act_on(actor, target_id):
            raise ForbiddenError(MISSING_ADMIN)

        with self.store.locked():
            index = self.store.find_index(lambda user: user.id == target_id)
            if index == -1:
                logger.info("Delete of unknown user %s by %s left the store unchanged", target_id, actor.id)
                return
            self.store.remove_at(index)

        logger.info("User %s deleted by %s", target_id, actor.id)

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------
    def seed(self, accounts: Iterable[SeedAccount]) -> List[User]:
        """Insert bootstrap accounts, skipping any whose email is taken."""

        created: List[User] = []
        for account in accounts:
            if self.email_registered(account.email):
                logger.warning("Skipping seed account %s: email already registered", account.email)
                continue
            password_hash = account.password_hash or self.hasher.hash(account.password or "")
            now = self._clock()
            user = User(
                id=account.uuid or self._id_factory(),
                email=account.email,
                name=account.name,
                password_hash=password_hash,
                created_on=now,
                updated_on=now,
                is_adm=account.is_adm,
                profile=dict(account.profile),
            )
            try:
                self.store.insert(user)
            except ValueError as exc:
                logger.warning("Skipping seed account %s: %s", account.email, exc)
                continue
            created.append(user)
        return created


__all__ = ["AccountService"]
