"""Supabase repository tests against a mocked supabase-py client."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from user_api.domain.user import User
from user_api.repositories.base import DuplicateKeyError
from user_api.repositories.supabase_repo import UserRepositorySupabase

ROW = {
    "id": "6f1c",
    "name": "John Doe",
    "email": "john@example.com",
    "phone": None,
    "role": "USER",
    "status": "ACTIVE",
    "address": None,
    "created_at": "2025-01-02T03:04:05.678+00:00",
    "updated_at": "2025-01-02T03:04:05.678+00:00",
}


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def table(client):
    return client.table.return_value


@pytest.fixture
def repo(client):
    return UserRepositorySupabase(client, "users")


def test_find_by_id_maps_row(repo, client, table):
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value.data = [ROW]

    user = repo.find_by_id("6f1c")

    client.table.assert_called_with("users")
    table.select.return_value.eq.assert_called_with("id", "6f1c")
    assert user.email == "john@example.com"
    assert user.created_at == datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def test_find_by_id_missing(repo, table):
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value.data = []
    assert repo.find_by_id("missing") is None


def test_save_without_id_inserts(repo, table):
    table.insert.return_value.execute.return_value.data = [ROW]

    saved = repo.save(User(name="John Doe", email="john@example.com", role="USER"))

    body = table.insert.call_args.args[0]
    assert body["id"]
    assert body["created_at"] == body["updated_at"]
    assert body["status"] == "ACTIVE"
    assert saved.id == "6f1c"


def test_save_existing_updates_by_id(repo, table):
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value.data = [ROW]
    table.update.return_value.eq.return_value.execute.return_value.data = [dict(ROW, name="Jane Doe")]

    saved = repo.save(User(id="6f1c", name="Jane Doe", email="john@example.com", role="USER"))

    body = table.update.call_args.args[0]
    assert body["name"] == "Jane Doe"
    assert "created_at" not in body
    assert body["updated_at"] > ROW["updated_at"]
    table.update.return_value.eq.assert_called_with("id", "6f1c")
    assert saved.name == "Jane Doe"


def test_unique_violation_becomes_duplicate_key(repo, table):
    table.insert.return_value.execute.side_effect = APIError(
        {"code": "23505", "message": "duplicate key value violates unique constraint \"users_email_key\""}
    )

    with pytest.raises(DuplicateKeyError):
        repo.save(User(name="John Doe", email="john@example.com", role="USER"))


def test_other_api_errors_propagate(repo, table):
    table.insert.return_value.execute.side_effect = APIError({"code": "42501", "message": "permission denied"})

    with pytest.raises(APIError):
        repo.save(User(name="John Doe", email="john@example.com", role="USER"))


def test_email_domain_lookup_uses_ilike(repo, table):
    table.select.return_value.ilike.return_value.execute.return_value.data = [ROW]

    users = repo.find_by_email_domain("example.com")

    table.select.return_value.ilike.assert_called_with("email", "%@example.com")
    assert [u.id for u in users] == ["6f1c"]


def test_like_wildcards_in_lookups_are_escaped(repo, table):
    table.select.return_value.ilike.return_value.execute.return_value.data = []

    repo.find_by_name_containing("50%_off")
    table.select.return_value.ilike.assert_called_with("name", "%50\\%\\_off%")

    repo.find_by_email_domain("my_corp.org")
    table.select.return_value.ilike.assert_called_with("email", "%@my\\_corp.org")


def test_update_of_vanished_row_reinserts_under_same_id(repo, table):
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value.data = [ROW]
    table.update.return_value.eq.return_value.execute.return_value.data = []
    table.insert.return_value.execute.return_value.data = [dict(ROW, name="Jane Doe")]

    saved = repo.save(User(id="6f1c", name="Jane Doe", email="john@example.com", role="USER"))

    body = table.insert.call_args.args[0]
    assert body["id"] == "6f1c"
    assert body["name"] == "Jane Doe"
    assert saved.name == "Jane Doe"


def test_save_with_no_returned_row_raises(repo, table):
    table.insert.return_value.execute.return_value.data = []

    with pytest.raises(RuntimeError, match="no row"):
        repo.save(User(name="John Doe", email="john@example.com", role="USER"))
