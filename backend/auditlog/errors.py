"""Exception classes raised by the audit log services."""


class AuditLogError(Exception):
    """Base exception for all audit log errors."""


class InvalidInput(AuditLogError):
    """Raised when a required field is missing or malformed."""


class NotFound(AuditLogError):
    """Raised when the targeted log entry does not exist."""


class StoreUnavailable(AuditLogError):
    """Raised when the log store cannot be reached or the statement fails."""
