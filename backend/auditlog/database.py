"""Shared SQLAlchemy Base and the process-wide log store handle."""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger("auditlog.store")

Base = declarative_base()


class LogStore:
    """Owns the engine (and its connection pool) behind the ``logs`` table.

    One instance lives for the whole process: ``open()`` acquires the pool at
    startup, ``close()`` releases it at shutdown. Components receive the store
    or a session from it instead of reaching for a module-level engine, which
    lets tests run against an in-memory SQLite database.
    """

    def __init__(self, database_url: str, pool_size: int = 5, echo: bool = False):
        self.database_url = database_url
        self.pool_size = pool_size
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @classmethod
    def from_settings(cls, settings) -> "LogStore":
        return cls(settings.database_url, pool_size=settings.db_pool_size, echo=settings.db_echo)

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("LogStore is not open")
        return self._engine

    def _engine_options(self) -> dict:
        options: dict = {"echo": self.echo}
        if self.database_url.startswith("sqlite"):
            options["connect_args"] = {"check_same_thread": False}
            # In-memory databases live and die with their single connection.
            if self.database_url in ("sqlite://", "sqlite:///:memory:"):
                options["poolclass"] = StaticPool
        else:
            options["pool_size"] = self.pool_size
            options["pool_pre_ping"] = True
        return options

    def open(self, create_tables: bool = False) -> None:
        """Create the engine. Safe to call more than once."""
        if self._engine is not None:
            return
        self._engine = create_engine(self.database_url, **self._engine_options())
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        if create_tables:
            # Import models so they register with Base.metadata
            import auditlog.models  # noqa: F401

            Base.metadata.create_all(bind=self._engine)
        logger.info("Log store opened (dialect=%s)", self._engine.dialect.name)

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Log store closed")

    def new_session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("LogStore is not open")
        return self._session_factory()

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.new_session()
        try:
            yield db
        finally:
            db.close()

    @property
    def snapshot_isolation_level(self) -> str:
        if self.engine.dialect.name == "sqlite":
            return "SERIALIZABLE"
        return "REPEATABLE READ"

    @contextmanager
    def snapshot(self) -> Iterator[Session]:
        """Session whose reads all see one consistent snapshot of the table."""
        with self.session() as db:
            db.connection(execution_options={"isolation_level": self.snapshot_isolation_level})
            try:
                yield db
            finally:
                db.rollback()

    def ping(self) -> None:
        """Round-trip to the database; raises SQLAlchemyError when unreachable."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))


def get_store(request: Request) -> LogStore:
    return request.app.state.store


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency that yields a database session."""
    db = get_store(request).new_session()
    try:
        yield db
    finally:
        db.close()
