# movie_explorer/database.py

import logging
from typing import Iterator
from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one process."""

    def __init__(self, url: str, echo: bool = False):
        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        parsed = make_url(url)
        is_sqlite = parsed.get_backend_name() == "sqlite"

        if is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if parsed.database in (None, "", ":memory:"):
                # one shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_recycle"] = 300

        self.engine = create_engine(url, **engine_kwargs)
        if is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(settings.database_url, echo=settings.database_echo)

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> None:
        """Raise if the store cannot be reached."""
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def create_all(self) -> None:
        # models must be registered on Base before create_all
        from movie_explorer import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ensured")

    def dispose(self) -> None:
        self.engine.dispose()


# FastAPI dependency
def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
