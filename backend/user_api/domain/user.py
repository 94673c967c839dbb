"""Domain dataclass for User entities (DB-agnostic)."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..constants import DEFAULT_STATUS

# Fields replaced wholesale by an update; id and created_at are never among them.
MUTABLE_FIELDS = ("name", "email", "phone", "role", "status", "address")


@dataclass(slots=True)
class User:
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    role: str = ""
    status: str = DEFAULT_STATUS
    address: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def utcnow() -> datetime:
    """Current UTC time truncated to millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def next_updated_at(previous: Optional[datetime]) -> datetime:
    """Return a modification time strictly after ``previous``."""
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(milliseconds=1)
    return now


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render ``value`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    value = as_utc(value)
    if value is None:
        return None
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
