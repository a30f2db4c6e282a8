"""Hard deletion of single audit log entries."""
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auditlog.errors import InvalidInput, NotFound, StoreUnavailable
from auditlog.models import LogEntry


def remove_entry(db: Session, entry_id: Optional[int]) -> None:
    """Delete the entry with ``entry_id``.

    Raises NotFound when no row was removed, so deleting twice is reported
    rather than silently treated as success.
    """
    if entry_id is None:
        raise InvalidInput("Log ID is required")

    try:
        result = db.execute(delete(LogEntry).where(LogEntry.id == entry_id))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreUnavailable("Failed to delete log entry") from exc

    if result.rowcount == 0:
        raise NotFound(f"Log entry {entry_id} not found")
