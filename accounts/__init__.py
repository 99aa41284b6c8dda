"""In-memory user account service: registration, login and profile management."""

from __future__ import annotations

from typing import Any

from .models import Actor, User, public_view
from .store import UserStore


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the account API application."""

    from .api import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "Actor",
    "User",
    "UserStore",
    "create_app",
    "public_view",
]
