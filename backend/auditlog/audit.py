"""Audit logging utilities: appending entries to the log store."""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auditlog.database import LogStore
from auditlog.errors import AuditLogError, InvalidInput, StoreUnavailable
from auditlog.models import LogEntry

logger = logging.getLogger("auditlog.ingest")


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def record_action(
    db: Session,
    action: Optional[str],
    description: Optional[str],
    user_id: Optional[int] = None,
    user_email: Optional[str] = None,
    product_code: Optional[str] = None,
    product_name: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> LogEntry:
    """Append one entry to the audit log and return it as persisted.

    Values are stored exactly as given; blank checks ignore surrounding whitespace.

    Args:
        db: Database session
        action: Action tag, e.g. 'PRODUCT_CREATE' (required)
        description: Human-readable summary (required)
        user_id, user_email: Actor at the time of the action
        product_code, product_name: Subject at the time of the action
        ip_address: Client address as reported by the caller

    Raises:
        InvalidInput: action or description is missing or blank. Nothing is written.
        StoreUnavailable: the insert could not be committed.
    """
    if not clean_text(action) or not clean_text(description):
        raise InvalidInput("Action and description are required")

    entry = LogEntry(
        action=action,
        description=description,
        user_id=user_id,
        user_email=user_email,
        product_code=product_code,
        product_name=product_name,
        ip_address=ip_address,
    )
    try:
        db.add(entry)
        db.commit()
        db.refresh(entry)
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreUnavailable("Failed to create log entry") from exc

    logger.debug("Recorded %s entry id=%s", entry.action, entry.id)
    return entry


def log_action(store: LogStore, action: str, description: str, **fields) -> Optional[LogEntry]:
    """Record an entry on behalf of another workflow without ever raising.

    Product, user and CSV workflows call this after their own change has
    succeeded. A failure to log is reported and swallowed so that it cannot
    undo or abort the triggering operation. Returns the entry, or None when
    nothing was recorded.
    """
    try:
        with store.session() as db:
            entry = record_action(db, action, description, **fields)
            db.expunge(entry)
            return entry
    except (AuditLogError, RuntimeError) as exc:
        logger.warning("Failed to log action %r: %s", action, exc)
        return None
