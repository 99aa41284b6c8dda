"""In-memory user store shared by every request handler."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, List, Optional

from .models import User

Predicate = Callable[[User], bool]


class UserStore:
    """Ordered collection of user records with linear lookups.

    Mutations are serialised through a re-entrant lock. Callers that need a
    lookup and a mutation to be atomic wrap both in :meth:`locked`.
    """

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users: List[User] = []
        self._lock = threading.RLock()
        for user in users:
            self.insert(user)

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    @contextmanager
    def locked(self) -> Iterator["UserStore"]:
        with self._lock:
            yield self

    def all(self) -> List[User]:
        with self._lock:
            return list(self._users)

    def find(self, predicate: Predicate) -> Optional[User]:
        with self._lock:
            for user in self._users:
                if predicate(user):
                    return user
        return None

    def find_index(self, predicate: Predicate) -> int:
        with self._lock:
            for index, user in enumerate(self._users):
                if predicate(user):
                    return index
        return -1

    def filter(self, predicate: Predicate) -> List[User]:
        with self._lock:
            return [user for user in self._users if predicate(user)]

    def get(self, user_id: str) -> Optional[User]:
        return self.find(lambda user: user.id == user_id)

    def insert(self, user: User) -> User:
        """Append ``user``, rejecting a duplicate email or identifier."""

        with self._lock:
            for existing in self._users:
                if existing.email == user.email:
                    raise ValueError("A user with that email already exists")
                if existing.id == user.id:
                    raise ValueError("A user with that identifier already exists")
            self._users.append(user)
        return user

    def replace_at(self, index: int, user: User) -> User:
        with self._lock:
            current = self.at(index)
            if current.id != user.id:
                raise ValueError("User identifiers are immutable")
            self._users[index] = user
        return user

    def remove_at(self, index: int) -> User:
        with self._lock:
            self.at(index)
            return self._users.pop(index)

    def at(self, index: int) -> User:
        with self._lock:
            if index < 0 or index >= len(self._users):
                raise IndexError(f"No user stored at index {index}")
            return self._users[index]


__all__ = ["Predicate", "UserStore"]
