"""SQLAlchemy-backed User repository returning dataclasses."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db.models.user import UserModel
from ..domain.user import MUTABLE_FIELDS, User, as_utc, next_updated_at, utcnow
from .base import DuplicateKeyError


def _to_dc(m: UserModel) -> User:
    return User(
        id=m.id,
        name=m.name,
        email=m.email,
        phone=m.phone,
        role=m.role,
        status=m.status,
        address=m.address,
        created_at=as_utc(m.created_at),
        updated_at=as_utc(m.updated_at),
    )


class UserRepositorySQLA:
    backend = "sqlalchemy"

    def __init__(self, session: Session) -> None:
        self.session = session

    def _all(self, stmt: Select) -> list[User]:
        return [_to_dc(m) for m in self.session.scalars(stmt).all()]

    def find_all(self) -> list[User]:
        return self._all(select(UserModel))

    def find_by_id(self, user_id: str) -> Optional[User]:
        m = self.session.get(UserModel, user_id)
        return _to_dc(m) if m else None

    def save(self, user: User) -> User:
        m = self.session.get(UserModel, user.id) if user.id else None
        if m is None:
            now = utcnow()
            m = UserModel(id=user.id or str(uuid.uuid4()), created_at=now, updated_at=now)
            self.session.add(m)
        else:
            m.updated_at = next_updated_at(as_utc(m.updated_at))
        for field in MUTABLE_FIELDS:
            setattr(m, field, getattr(user, field))
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if "email" in str(exc.orig).lower():
                raise DuplicateKeyError("email", user.email) from exc
            raise
        self.session.refresh(m)
        return _to_dc(m)

    def delete_by_id(self, user_id: str) -> None:
        m = self.session.get(UserModel, user_id)
        if not m:
            return
        self.session.delete(m)
        self.session.commit()

    def delete(self, user: User) -> None:
        if user.id:
            self.delete_by_id(user.id)

    def find_by_email(self, email: str) -> Optional[User]:
        stmt = select(UserModel).where(UserModel.email == email).limit(1)
        m = self.session.scalars(stmt).first()
        return _to_dc(m) if m else None

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def find_by_role(self, role: str) -> list[User]:
        return self._all(select(UserModel).where(UserModel.role == role))

    def find_by_status(self, status: str) -> list[User]:
        return self._all(select(UserModel).where(UserModel.status == status))

    def find_by_name_containing(self, name_part: str) -> list[User]:
        return self._all(select(UserModel).where(UserModel.name.icontains(name_part, autoescape=True)))

    def find_created_after(self, timestamp: datetime) -> list[User]:
        return self._all(select(UserModel).where(UserModel.created_at > as_utc(timestamp)))

    def find_by_email_domain(self, domain: str) -> list[User]:
        suffix = "@" + domain.lstrip("@")
        return self._all(select(UserModel).where(UserModel.email.iendswith(suffix, autoescape=True)))
