"""All SQLAlchemy models – re-exported for Alembic and app use."""

from auditlog.models.log_entry import ActionCode, LogEntry

__all__ = ["ActionCode", "LogEntry"]
