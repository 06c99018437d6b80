"""Persistence boundary for shares and their owners.

``ShareStore`` and ``UserStore`` are the interfaces the secret service needs
from a document store.  The in-memory implementations keep records in dicts
(sufficient for tests and single-process use).
"""

from __future__ import annotations

import threading
import uuid
from typing import Dict, List, Optional, Protocol, Sequence

from shamirvault.vault.models import PartialSecret, User


class ShareStore(Protocol):
    def save_many(self, records: Sequence[PartialSecret]) -> List[PartialSecret]:
        ...

    def find_by_public_key(
        self, public_key: str, user_id: Optional[str] = None
    ) -> List[PartialSecret]:
        ...

    def delete_by_public_key(self, public_key: str) -> int:
        ...


class InMemoryShareStore:
    """Dict-backed ``ShareStore``; records keep insertion order."""

    def __init__(self) -> None:
        # record id -> PartialSecret
        self._records: Dict[str, PartialSecret] = {}
        self._lock = threading.Lock()

    def save_many(self, records: Sequence[PartialSecret]) -> List[PartialSecret]:
        saved = [r.model_copy(update={"id": r.id or uuid.uuid4().hex}) for r in records]
        with self._lock:
            for r in saved:
                self._records[r.id] = r
        return saved

    def find_by_public_key(
        self, public_key: str, user_id: Optional[str] = None
    ) -> List[PartialSecret]:
        with self._lock:
            return [
                r
                for r in self._records.values()
                if r.public_key == public_key and (user_id is None or r.user_id == user_id)
            ]

    def delete_by_public_key(self, public_key: str) -> int:
        with self._lock:
            doomed = [rid for rid, r in self._records.items() if r.public_key == public_key]
            for rid in doomed:
                del self._records[rid]
        return len(doomed)

    def __len__(self) -> int:
        return len(self._records)


class UserStore(Protocol):
    def create_user(self, user: User) -> str:
        ...

    def get_user(self, user_id: str) -> Optional[User]:
        ...


class InMemoryUserStore:
    """Dict-backed ``UserStore``.

    ``create_user`` is idempotent: storing a user whose wallets match an
    existing document returns that document's id instead of inserting again.
    """

    def __init__(self) -> None:
        # user id -> User
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    def create_user(self, user: User) -> str:
        with self._lock:
            for uid, existing in self._users.items():
                if existing.wallets == user.wallets:
                    return uid
            uid = user.id or uuid.uuid4().hex
            self._users[uid] = user.model_copy(update={"id": uid})
        return uid

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def __len__(self) -> int:
        return len(self._users)
