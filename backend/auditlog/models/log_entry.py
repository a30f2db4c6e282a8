"""Audit log entry model."""
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from auditlog.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActionCode(str, enum.Enum):
    """Action tags emitted by the inventory workflows. Not enforced by the table."""
    PRODUCT_CREATE = "PRODUCT_CREATE"
    PRODUCT_UPDATE = "PRODUCT_UPDATE"
    PRODUCT_DELETE = "PRODUCT_DELETE"
    USER_LOGIN = "USER_LOGIN"
    USER_LOGOUT = "USER_LOGOUT"
    CSV_IMPORT = "CSV_IMPORT"
    CSV_EXPORT = "CSV_EXPORT"


class LogEntry(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    # Actor and subject are copied at write time, never joined at read time
    user_id = Column(Integer, nullable=True)
    user_email = Column(String(255), nullable=True)
    product_code = Column(String(100), nullable=True)
    product_name = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, index=True,
        default=utcnow, server_default=func.now(),
    )
    ip_address = Column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<LogEntry id={self.id} action={self.action!r}>"
