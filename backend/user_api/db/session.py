"""SQLAlchemy engine/session initialization and lifecycle management."""
from __future__ import annotations

from typing import Any

from flask import Flask
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from .base import Base


def _engine_kwargs(url: str, pool_size: int, max_overflow: int) -> dict[str, Any]:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return {"pool_size": pool_size, "max_overflow": max_overflow}
    kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        # One shared connection, otherwise each session sees an empty database.
        kwargs["poolclass"] = StaticPool
    return kwargs


class Database:
    def __init__(self) -> None:
        self.engine = None
        self.Session = None  # type: ignore[assignment]

    def init_app(self, app: Flask) -> None:
        url: str = app.config["DATABASE_URL"]
        echo: bool = app.config.get("SQL_ECHO", False)
        pool_size: int = app.config.get("POOL_SIZE", 10)
        max_overflow: int = app.config.get("MAX_OVERFLOW", 20)

        self.engine = create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            **_engine_kwargs(url, pool_size, max_overflow),
        )
        self.Session = scoped_session(
            sessionmaker(bind=self.engine, expire_on_commit=False, autoflush=False)
        )
        if app.config.get("CREATE_TABLES", True):
            Base.metadata.create_all(self.engine)
            logger.info("Ensured tables exist on {}", make_url(url).render_as_string(hide_password=True))

        @app.teardown_appcontext
        def remove_session(_: object | None) -> None:
            if self.Session is not None:
                self.Session.remove()
