"""Pytest configuration and fixtures."""

import pytest

from user_api import create_app
from user_api.config import InMemoryConfig
from user_api.domain.user import User
from user_api.repositories.memory import InMemoryUserRepository
from user_api.services.user_service import UserService

USERS_API = "/api/v1/user-service/users"


@pytest.fixture
def repo():
    """Fresh in-memory repository for each test."""
    return InMemoryUserRepository()


@pytest.fixture
def service(repo):
    return UserService(repo)


@pytest.fixture
def app(repo):
    app = create_app(InMemoryConfig, repository=repo)
    yield app


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def john():
    return User(name="John Doe", email="john@example.com", role="USER")


@pytest.fixture
def john_payload():
    return {"name": "John Doe", "email": "john@example.com", "role": "USER"}
