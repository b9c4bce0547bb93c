"""
Engine and session lifecycle for the relational store.

A single ``Database`` is built at application start, stored on
``app.state`` and disposed at shutdown. Route handlers receive sessions
through the ``get_session`` dependency.
"""

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base

DEFAULT_DATABASE_URL = "sqlite:///./work_monitor.db"


class Database:
    """
    Owns one pooled engine and the session factory bound to it.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url or os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
        self.engine: Engine = create_engine(self.url, **self._engine_options(self.url))
        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )

    @staticmethod
    def _engine_options(url: str) -> dict:
        if not url.startswith("sqlite"):
            return {"pool_pre_ping": True}

        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live inside one connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Yield a session that is closed on exit. Callers commit explicitly.
        """
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_session(request: Request) -> Iterator[Session]:
    """
    FastAPI dependency yielding a session from the application's database.
    """
    database: Database = request.app.state.database
    with database.session() as session:
        yield session
