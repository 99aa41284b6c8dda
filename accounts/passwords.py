"""Password hashing for account credentials."""

from __future__ import annotations

import anyio
from passlib.context import CryptContext

DEFAULT_BCRYPT_ROUNDS = 10


class PasswordHasher:
    """bcrypt hashing with a fixed cost factor."""

    def __init__(self, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return self._context.verify(password, hashed)
        except ValueError:
            return False

    async def hash_async(self, password: str) -> str:
        return await anyio.to_thread.run_sync(self.hash, password)

    async def verify_async(self, password: str, hashed: str) -> bool:
        return await anyio.to_thread.run_sync(self.verify, password, hashed)


__all__ = ["DEFAULT_BCRYPT_ROUNDS", "PasswordHasher"]
