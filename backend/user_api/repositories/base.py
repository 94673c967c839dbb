"""Storage contract for User records.

Every backend persists whole User documents keyed by a store-assigned id and
keeps a unique index on ``email``. ``save`` inserts when the id is empty and
overwrites otherwise; a write that would duplicate an email raises
``DuplicateKeyError`` before anything is persisted.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from ..domain.user import User


class DuplicateKeyError(Exception):
    """Raised by a repository when a unique index would be violated."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"duplicate key for {field}: {value}")
        self.field = field
        self.value = value


@runtime_checkable
class UserRepository(Protocol):
    backend: str

    def find_all(self) -> list[User]: ...

    def find_by_id(self, user_id: str) -> Optional[User]: ...

    def save(self, user: User) -> User: ...

    def delete_by_id(self, user_id: str) -> None: ...

    def delete(self, user: User) -> None: ...

    def find_by_email(self, email: str) -> Optional[User]: ...

    def exists_by_email(self, email: str) -> bool: ...

    def find_by_role(self, role: str) -> list[User]: ...

    def find_by_status(self, status: str) -> list[User]: ...

    def find_by_name_containing(self, name_part: str) -> list[User]: ...

    def find_created_after(self, timestamp: datetime) -> list[User]: ...

    def find_by_email_domain(self, domain: str) -> list[User]: ...
