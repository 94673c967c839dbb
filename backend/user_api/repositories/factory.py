"""Repository factory for User (memory|sqlalchemy|supabase)."""
from __future__ import annotations

from flask import Flask, current_app

from ..db.session import Database
from ..integrations.supabase_client import SupabaseExt
from .base import UserRepository
from .memory import InMemoryUserRepository
from .sqlalchemy_repo import UserRepositorySQLA
from .supabase_repo import UserRepositorySupabase

BACKENDS = ("memory", "sqlalchemy", "supabase")

# Keys under ``app.extensions``.
EXT_REPOSITORY = "user_repository"
EXT_DATABASE = "user_database"
EXT_SUPABASE = "user_supabase"


def configured_backend(app: Flask) -> str:
    backend = (app.config.get("USER_REPO_BACKEND") or "memory").lower()
    if backend not in BACKENDS:
        raise RuntimeError(f"Unknown USER_REPO_BACKEND {backend!r}; expected one of {', '.join(BACKENDS)}")
    return backend


def init_storage(app: Flask, repository: UserRepository | None = None) -> None:
    """Prepare whatever the configured backend needs at startup."""
    if repository is not None:
        app.extensions[EXT_REPOSITORY] = repository
        return

    backend = configured_backend(app)
    if backend == "memory":
        app.extensions[EXT_REPOSITORY] = InMemoryUserRepository()
    elif backend == "sqlalchemy":
        database = Database()
        database.init_app(app)
        app.extensions[EXT_DATABASE] = database
    else:
        ext = SupabaseExt()
        ext.init_app(app)
        if ext.client is None:
            raise RuntimeError("Supabase client is not initialized; set SUPABASE_URL and a key.")
        app.extensions[EXT_SUPABASE] = ext


def user_repo() -> UserRepository:
    """Return the repository serving the current request."""
    app = current_app
    shared = app.extensions.get(EXT_REPOSITORY)
    if shared is not None:
        return shared

    database = app.extensions.get(EXT_DATABASE)
    if database is not None:
        if database.Session is None:
            raise RuntimeError("Database session is not initialized; call init_storage() first.")
        return UserRepositorySQLA(database.Session())

    ext = app.extensions.get(EXT_SUPABASE)
    if ext is not None:
        return UserRepositorySupabase(ext.client, app.config.get("SUPABASE_USERS_TABLE", "users"))

    raise RuntimeError("User storage is not initialized; call init_storage() first.")


def storage_status(app: Flask) -> dict[str, object]:
    repo = app.extensions.get(EXT_REPOSITORY)
    database = app.extensions.get(EXT_DATABASE)
    ext = app.extensions.get(EXT_SUPABASE)
    if repo is not None:
        backend = getattr(repo, "backend", type(repo).__name__)
    elif database is not None:
        backend = "sqlalchemy"
    elif ext is not None:
        backend = "supabase"
    else:
        backend = None
    return {"backend": backend, "initialized": backend is not None}
