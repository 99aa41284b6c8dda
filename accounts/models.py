"""Domain models for the account service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet


RESERVED_FIELDS: FrozenSet[str] = frozenset(
    {"uuid", "email", "name", "password", "isAdm", "createdOn", "updatedOn"}
)


@dataclass(frozen=True)
class User:
    """Represents a user account held in the in-memory store."""

    id: str
    email: str
    name: str
    password_hash: str
    created_on: datetime
    updated_on: datetime
    is_adm: bool = False
    profile: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class Actor:
    """Identity of the caller, as asserted by a verified bearer token."""

    id: str
    is_adm: bool = False


def public_view(user: User) -> Dict[str, object]:
    """Project a user record to the representation returned to callers.

    The password credential is never part of the result, and profile extras
    never shadow the record's own fields.
    """

    view: Dict[str, object] = {
        key: value for key, value in user.profile.items() if key not in RESERVED_FIELDS
    }
    view.update(
        {
            "uuid": user.id,
            "email": user.email,
            "name": user.name,
            "isAdm": user.is_adm,
            "createdOn": user.created_on,
            "updatedOn": user.updated_on,
        }
    )
    return view


__all__ = ["Actor", "RESERVED_FIELDS", "User", "public_view"]
