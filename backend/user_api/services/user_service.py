"""User service encapsulating business rules."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from loguru import logger

from ..domain.user import MUTABLE_FIELDS, User
from ..errors import ConstraintViolationError, EmailConflictError, InvalidArgumentError, NotFoundError
from ..repositories.base import DuplicateKeyError, UserRepository
from ..validation import ensure_valid


class UserService:
    """CRUD over a ``UserRepository`` handed in by the caller.

    Email uniqueness is left to the repository's unique index; a duplicate
    surfaces as ``EmailConflictError`` without a read-then-write check here.
    """

    def __init__(self, repo: UserRepository) -> None:
        self.repo = repo

    @staticmethod
    def _require_id(user_id: str) -> str:
        if user_id is None or not str(user_id).strip():
            raise InvalidArgumentError("User id must not be blank")
        return user_id

    def _save(self, user: User) -> User:
        try:
            return self.repo.save(user)
        except DuplicateKeyError as exc:
            logger.warning("Rejected write for duplicate email={}", user.email)
            raise EmailConflictError(user.email) from exc

    def list_all(self) -> list[User]:
        logger.info("Retrieving all users from {} storage", self.repo.backend)
        return self.repo.find_all()

    def get_by_id(self, user_id: str) -> User:
        self._require_id(user_id)
        logger.info("Searching user by id={}", user_id)
        user = self.repo.find_by_id(user_id)
        if user is None:
            logger.error("User not found with id={}", user_id)
            raise NotFoundError(f"User not found: {user_id}")
        return user

    def create(self, candidate: User) -> User:
        ensure_valid(candidate)
        # Identity is always assigned by storage.
        new_user = replace(candidate, id=None, created_at=None, updated_at=None)
        logger.info("Saving new user with email={} and role={}", new_user.email, new_user.role)
        return self._save(new_user)

    def update(self, user_id: str, candidate: User) -> User:
        ensure_valid(candidate)
        existing = self.get_by_id(user_id)
        logger.info("Updating user id={} with new values", user_id)
        changes = {field: getattr(candidate, field) for field in MUTABLE_FIELDS}
        return self._save(replace(existing, **changes))

    def delete(self, user_id: str) -> None:
        existing = self.get_by_id(user_id)
        logger.info("Deleting user with id={} and email={}", user_id, existing.email)
        self.repo.delete(existing)

    def search(
        self,
        *,
        email: Optional[str] = None,
        role: Optional[str] = None,
        status: Optional[str] = None,
        name: Optional[str] = None,
        email_domain: Optional[str] = None,
        created_after: Optional[datetime] = None,
    ) -> list[User]:
        """Run exactly one derived lookup against the repository."""
        criteria = {
            "email": email,
            "role": role,
            "status": status,
            "name": name,
            "emailDomain": email_domain,
            "createdAfter": created_after,
        }
        given = [k for k, v in criteria.items() if v is not None and v != ""]
        if len(given) != 1:
            names = ", ".join(criteria)
            raise ConstraintViolationError([f"Exactly one search criterion is required ({names})"])

        logger.info("Searching users by {}", given[0])
        if email:
            found = self.repo.find_by_email(email)
            return [found] if found else []
        if role:
            return self.repo.find_by_role(role)
        if status:
            return self.repo.find_by_status(status)
        if name:
            return self.repo.find_by_name_containing(name)
        if email_domain:
            return self.repo.find_by_email_domain(email_domain)
        return self.repo.find_created_after(created_after)
