"""Test fixtures for the audit log service."""
from __future__ import annotations

from datetime import datetime
from typing import Iterator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from auditlog.config import Settings
from auditlog.database import Base, LogStore
from auditlog.main import create_app
from auditlog.models import LogEntry


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        create_tables=True,
        rate_limit_enabled=False,
        log_level="WARNING",
    )


@pytest.fixture
def store(settings: Settings) -> Iterator[LogStore]:
    """In-memory SQLite store with the logs table created."""
    log_store = LogStore.from_settings(settings)
    log_store.open(create_tables=True)
    yield log_store
    log_store.close()


@pytest.fixture
def db(store: LogStore) -> Iterator[Session]:
    with store.session() as session:
        yield session


@pytest.fixture
def client(settings: Settings, store: LogStore) -> Iterator[TestClient]:
    app = create_app(settings, store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def break_store(store: LogStore):
    """Make every further statement fail the way a lost database would."""
    def _break() -> None:
        Base.metadata.drop_all(bind=store.engine)
    return _break


@pytest.fixture
def make_entry(db: Session):
    """Insert a row directly, optionally pinning ``created_at``."""
    def _make(
        action: str = "PRODUCT_UPDATE",
        description: str = "Stock adjusted",
        created_at: Optional[datetime] = None,
        **fields,
    ) -> LogEntry:
        entry = LogEntry(action=action, description=description, **fields)
        if created_at is not None:
            entry.created_at = created_at
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry
    return _make
