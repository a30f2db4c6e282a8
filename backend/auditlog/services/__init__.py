from auditlog.services.filters import LogFilters, LogPredicate, MATCH_ALL, build_predicate
from auditlog.services.purge import remove_entry
from auditlog.services.query import LogPage, query_logs, query_logs_snapshot

__all__ = [
    "LogFilters", "LogPredicate", "MATCH_ALL", "build_predicate",
    "remove_entry",
    "LogPage", "query_logs", "query_logs_snapshot",
]
