"""Users blueprint (CRUD)."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from flask import Blueprint, request, url_for
from loguru import logger

from ...constants import (
    MSG_USER_CREATED,
    MSG_USER_DELETED,
    MSG_USER_FETCHED,
    MSG_USER_UPDATED,
    MSG_USERS_FETCHED,
)
from ...errors import ConstraintViolationError, ok
from ...repositories.factory import user_repo
from ...services.user_service import UserService
from .schemas import UserIn, dump_user


bp = Blueprint("users", __name__)


def _service() -> UserService:
    return UserService(user_repo())


def _parse_created_after(raw: Optional[str]) -> Optional[datetime]:
    if raw is None or raw == "":
        return None
    try:
        if raw.isascii() and raw.isdigit():
            return datetime.fromtimestamp(int(raw) / 1000, tz=timezone.utc)
        return datetime.fromisoformat(raw)
    except (ValueError, OverflowError, OSError):
        raise ConstraintViolationError(
            ["createdAfter must be an ISO-8601 timestamp or epoch milliseconds"]
        ) from None


@bp.get("")
def list_users():
    logger.info("Fetching all users")
    items = [dump_user(u) for u in _service().list_all()]
    return ok(items, MSG_USERS_FETCHED)


@bp.get("/search")
def search_users():
    args = request.args
    users = _service().search(
        email=args.get("email"),
        role=args.get("role"),
        status=args.get("status"),
        name=args.get("name"),
        email_domain=args.get("emailDomain"),
        created_after=_parse_created_after(args.get("createdAfter")),
    )
    return ok([dump_user(u) for u in users], MSG_USERS_FETCHED)


@bp.get("/<user_id>")
def get_user(user_id: str):
    logger.info("Fetching user with id={}", user_id)
    user = _service().get_by_id(user_id)
    return ok(dump_user(user), MSG_USER_FETCHED)


@bp.post("")
def create_user():
    payload = UserIn.model_validate_json(request.get_data())
    logger.info("Creating new user with email={} and role={}", payload.email, payload.role)
    created = _service().create(payload.to_user())
    location = url_for("users.get_user", user_id=created.id)
    return ok(dump_user(created), MSG_USER_CREATED, 201, headers={"Location": location})


@bp.put("/<user_id>")
def update_user(user_id: str):
    payload = UserIn.model_validate_json(request.get_data())
    logger.info("Updating user with id={}", user_id)
    updated = _service().update(user_id, payload.to_user())
    return ok(dump_user(updated), MSG_USER_UPDATED)


@bp.delete("/<user_id>")
def delete_user(user_id: str):
    logger.info("Deleting user with id={}", user_id)
    _service().delete(user_id)
    return ok(None, MSG_USER_DELETED)
