"""Supabase-backed User repository using supabase-py v2.

The ``users`` table is expected to carry a unique index on ``email``;
PostgREST reports a violation as ``APIError`` with code ``23505``.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError
from supabase import Client

from ..domain.user import MUTABLE_FIELDS, User, as_utc, next_updated_at, utcnow
from .base import DuplicateKeyError

UNIQUE_VIOLATION = "23505"


def _like_literal(value: str) -> str:
    """Escape LIKE wildcards so ``value`` matches only itself."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _parse_ts(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    return as_utc(datetime.fromisoformat(str(value)))


def _row_to_dc(row: Dict[str, Any]) -> User:
    return User(
        id=str(row.get("id")),
        name=row.get("name") or "",
        email=row.get("email") or "",
        phone=row.get("phone"),
        role=row.get("role") or "",
        status=row.get("status") or "",
        address=row.get("address"),
        created_at=_parse_ts(row.get("created_at")),
        updated_at=_parse_ts(row.get("updated_at")),
    )


class UserRepositorySupabase:
    backend = "supabase"

    def __init__(self, client: Client, table_name: str = "users") -> None:
        self.client = client
        self.table_name = table_name

    @property
    def table(self):
        return self.client.table(self.table_name)

    def _rows(self, query) -> list[User]:
        res = query.execute()
        return [_row_to_dc(r) for r in (res.data or [])]

    def find_all(self) -> list[User]:
        return self._rows(self.table.select("*"))

    def find_by_id(self, user_id: str) -> Optional[User]:
        rows = self._rows(self.table.select("*").eq("id", user_id).limit(1))
        return rows[0] if rows else None

    def _insert(self, body: Dict[str, Any], user_id: Optional[str]) -> list[Dict[str, Any]]:
        now = utcnow().isoformat()
        row = dict(body, id=user_id or str(uuid.uuid4()), created_at=now, updated_at=now)
        return self.table.insert(row).execute().data or []

    def save(self, user: User) -> User:
        body: Dict[str, Any] = {f: getattr(user, f) for f in MUTABLE_FIELDS}
        existing = self.find_by_id(user.id) if user.id else None
        try:
            if existing is None:
                rows = self._insert(body, user.id)
            else:
                body["updated_at"] = next_updated_at(existing.updated_at).isoformat()
                rows = self.table.update(body).eq("id", existing.id).execute().data or []
                if not rows:
                    # Row vanished between the read and the update; save with an unknown id inserts.
                    rows = self._insert(body, existing.id)
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateKeyError("email", user.email) from exc
            raise
        if not rows:
            raise RuntimeError(f"Supabase returned no row for user {user.id or user.email}")
        return _row_to_dc(rows[0])

    def delete_by_id(self, user_id: str) -> None:
        self.table.delete().eq("id", user_id).execute()

    def delete(self, user: User) -> None:
        if user.id:
            self.delete_by_id(user.id)

    def find_by_email(self, email: str) -> Optional[User]:
        rows = self._rows(self.table.select("*").eq("email", email).limit(1))
        return rows[0] if rows else None

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def find_by_role(self, role: str) -> list[User]:
        return self._rows(self.table.select("*").eq("role", role))

    def find_by_status(self, status: str) -> list[User]:
        return self._rows(self.table.select("*").eq("status", status))

    def find_by_name_containing(self, name_part: str) -> list[User]:
        return self._rows(self.table.select("*").ilike("name", f"%{_like_literal(name_part)}%"))

    def find_created_after(self, timestamp: datetime) -> list[User]:
        return self._rows(self.table.select("*").gt("created_at", as_utc(timestamp).isoformat()))

    def find_by_email_domain(self, domain: str) -> list[User]:
        return self._rows(self.table.select("*").ilike("email", f"%@{_like_literal(domain.lstrip('@'))}"))
