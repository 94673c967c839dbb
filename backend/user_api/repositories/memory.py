"""In-process document collection for User records."""
from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Optional

from ..domain.user import User, as_utc, next_updated_at, utcnow
from .base import DuplicateKeyError


class InMemoryUserRepository:
    """Thread-safe store holding copies of User documents.

    Documents are copied on the way in and out so callers never share state
    with the collection. The email index is checked and updated under the
    same lock as the write, which makes uniqueness hold under concurrent
    requests.
    """

    backend = "memory"

    def __init__(self) -> None:
        self._docs: Dict[str, User] = {}
        self._email_index: Dict[str, str] = {}
        self._lock = threading.Lock()

    def _select(self, predicate: Callable[[User], bool]) -> list[User]:
        with self._lock:
            return [replace(u) for u in self._docs.values() if predicate(u)]

    def find_all(self) -> list[User]:
        return self._select(lambda _: True)

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            doc = self._docs.get(user_id)
            return replace(doc) if doc else None

    def save(self, user: User) -> User:
        with self._lock:
            existing = self._docs.get(user.id) if user.id else None
            owner = self._email_index.get(user.email)
            if owner is not None and (existing is None or owner != existing.id):
                raise DuplicateKeyError("email", user.email)

            if existing is None:
                now = utcnow()
                doc = replace(user, id=user.id or uuid.uuid4().hex, created_at=now, updated_at=now)
            else:
                doc = replace(
                    user,
                    created_at=existing.created_at,
                    updated_at=next_updated_at(existing.updated_at),
                )
                self._email_index.pop(existing.email, None)

            self._docs[doc.id] = doc
            self._email_index[doc.email] = doc.id
            return replace(doc)

    def delete_by_id(self, user_id: str) -> None:
        with self._lock:
            doc = self._docs.pop(user_id, None)
            if doc is not None:
                self._email_index.pop(doc.email, None)

    def delete(self, user: User) -> None:
        if user.id:
            self.delete_by_id(user.id)

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._email_index.get(email)
            return replace(self._docs[user_id]) if user_id else None

    def exists_by_email(self, email: str) -> bool:
        with self._lock:
            return email in self._email_index

    def find_by_role(self, role: str) -> list[User]:
        return self._select(lambda u: u.role == role)

    def find_by_status(self, status: str) -> list[User]:
        return self._select(lambda u: u.status == status)

    def find_by_name_containing(self, name_part: str) -> list[User]:
        needle = name_part.lower()
        return self._select(lambda u: needle in (u.name or "").lower())

    def find_created_after(self, timestamp: datetime) -> list[User]:
        after = as_utc(timestamp)
        return self._select(lambda u: u.created_at is not None and u.created_at > after)

    def find_by_email_domain(self, domain: str) -> list[User]:
        suffix = "@" + domain.lower().lstrip("@")
        return self._select(lambda u: u.email.lower().endswith(suffix))
