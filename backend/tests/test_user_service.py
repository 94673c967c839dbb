"""Unit tests for UserService."""

from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from user_api.domain.user import User
from user_api.errors import (
    ConstraintViolationError,
    EmailConflictError,
    InvalidArgumentError,
    NotFoundError,
    ValidationFailedError,
)
from user_api.repositories.base import DuplicateKeyError, UserRepository
from user_api.services.user_service import UserService


def test_create_assigns_identity_and_timestamps(service, john):
    created = service.create(john)

    assert created.id
    assert created.created_at is not None
    assert created.updated_at == created.created_at
    assert created.status == "ACTIVE"


def test_create_ignores_client_supplied_id(service, repo, john):
    created = service.create(replace(john, id="client-chosen"))

    assert created.id != "client-chosen"
    assert repo.find_by_id("client-chosen") is None


def test_create_then_get_round_trip(service, john):
    john = replace(john, phone="+1 555 010 2030", address="1 Main St", status="INACTIVE")
    created = service.create(john)
    fetched = service.get_by_id(created.id)

    for field in ("name", "email", "phone", "role", "status", "address"):
        assert getattr(fetched, field) == getattr(john, field)
    assert fetched.created_at == created.created_at


def test_get_by_id_is_repeatable(service, john):
    created = service.create(john)
    assert service.get_by_id(created.id) == service.get_by_id(created.id)


def test_create_duplicate_email_conflicts(service, repo, john):
    service.create(john)

    with pytest.raises(EmailConflictError) as exc_info:
        service.create(replace(john, name="Johnny"))

    assert exc_info.value.status_code == 409
    assert len([u for u in repo.find_all() if u.email == john.email]) == 1


def test_create_invalid_candidate_never_reaches_storage(john):
    repo = MagicMock(spec=UserRepository)
    service = UserService(repo)

    with pytest.raises(ValidationFailedError) as exc_info:
        service.create(replace(john, name="", email="invalid"))

    assert "name" in exc_info.value.message
    assert "email" in exc_info.value.message
    repo.save.assert_not_called()


def test_create_relies_on_store_for_uniqueness(john):
    repo = MagicMock(spec=UserRepository)
    repo.save.side_effect = DuplicateKeyError("email", john.email)
    service = UserService(repo)

    with pytest.raises(EmailConflictError):
        service.create(john)

    repo.find_by_email.assert_not_called()
    repo.exists_by_email.assert_not_called()
    saved = repo.save.call_args.args[0]
    assert saved.id is None


def test_list_all(service, john):
    service.create(john)
    service.create(User(name="Jane Doe", email="jane@example.com", role="ADMIN"))

    assert {u.email for u in service.list_all()} == {"john@example.com", "jane@example.com"}


def test_missing_id_is_not_found_everywhere(service, repo, john):
    service.create(john)
    before = repo.find_all()

    with pytest.raises(NotFoundError) as exc_info:
        service.get_by_id("missing")
    assert exc_info.value.message == "User not found: missing"

    with pytest.raises(NotFoundError):
        service.update("missing", john)
    with pytest.raises(NotFoundError):
        service.delete("missing")

    assert repo.find_all() == before


@pytest.mark.parametrize("user_id", ["", "   "])
def test_blank_id_is_invalid_argument(service, user_id):
    with pytest.raises(InvalidArgumentError):
        service.get_by_id(user_id)


def test_update_replaces_every_mutable_field(service, john):
    created = service.create(replace(john, phone="+1 555 010 2030", address="1 Main St"))

    updated = service.update(created.id, User(name="Jane Doe", email="jane@example.com", role="ADMIN"))

    assert updated.id == created.id
    assert updated.name == "Jane Doe"
    assert updated.email == "jane@example.com"
    assert updated.role == "ADMIN"
    # Omitted fields overwrite with their defaults.
    assert updated.phone is None
    assert updated.address is None
    assert updated.status == "ACTIVE"


def test_update_keeps_created_at_and_advances_updated_at(service, john):
    created = service.create(john)

    first = service.update(created.id, replace(john, name="John Q. Doe"))
    second = service.update(created.id, replace(john, name="John R. Doe"))

    assert first.created_at == created.created_at
    assert second.created_at == created.created_at
    assert created.updated_at < first.updated_at < second.updated_at


def test_update_ignores_candidate_identity(service, john):
    created = service.create(john)
    candidate = replace(john, id="other", name="Johnny")

    updated = service.update(created.id, candidate)

    assert updated.id == created.id
    assert service.get_by_id(created.id).name == "Johnny"


def test_update_to_taken_email_conflicts(service, john):
    service.create(john)
    jane = service.create(User(name="Jane Doe", email="jane@example.com", role="USER"))

    with pytest.raises(EmailConflictError):
        service.update(jane.id, replace(john, name="Jane Doe"))

    assert service.get_by_id(jane.id).email == "jane@example.com"


def test_update_may_keep_own_email(service, john):
    created = service.create(john)
    updated = service.update(created.id, replace(john, role="ADMIN"))
    assert updated.email == john.email


def test_delete_removes_record(service, john):
    created = service.create(john)

    service.delete(created.id)

    with pytest.raises(NotFoundError):
        service.get_by_id(created.id)


def test_delete_passes_existing_record_to_storage(john):
    stored = replace(john, id="123")
    repo = MagicMock(spec=UserRepository)
    repo.find_by_id.return_value = stored
    service = UserService(repo)

    service.delete("123")

    repo.delete.assert_called_once_with(stored)


def test_search_by_single_criterion(service, john):
    service.create(john)
    service.create(User(name="Jane Roe", email="jane@corp.org", role="ADMIN", status="SUSPENDED"))

    assert [u.email for u in service.search(role="ADMIN")] == ["jane@corp.org"]
    assert [u.email for u in service.search(status="SUSPENDED")] == ["jane@corp.org"]
    assert [u.email for u in service.search(name="doe")] == ["john@example.com"]
    assert [u.email for u in service.search(email_domain="CORP.org")] == ["jane@corp.org"]
    assert [u.email for u in service.search(email="john@example.com")] == ["john@example.com"]
    assert service.search(email="nobody@example.com") == []


@pytest.mark.parametrize("criteria", [{}, {"role": "USER", "status": "ACTIVE"}, {"role": ""}])
def test_search_requires_exactly_one_criterion(service, criteria):
    with pytest.raises(ConstraintViolationError):
        service.search(**criteria)
