"""Paginated, filtered reads of the audit log."""
import math
from dataclasses import dataclass
from typing import List

from sqlalchemy import Select, func, select, true
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from auditlog.database import LogStore
from auditlog.errors import InvalidInput, StoreUnavailable
from auditlog.models import LogEntry
from auditlog.services.filters import MATCH_ALL, LogPredicate

DEFAULT_PAGE_SIZE = 20


@dataclass
class LogPage:
    items: List[LogEntry]
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


def _check_paging(page: int, limit: int) -> None:
    if page < 1:
        raise InvalidInput("page must be >= 1")
    if limit < 1:
        raise InvalidInput("limit must be >= 1")


def _page_statement(predicate: LogPredicate, page: int, limit: int) -> Select:
    return (
        predicate.apply(select(LogEntry))
        .order_by(LogEntry.created_at.desc(), LogEntry.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )


def _count_statement(predicate: LogPredicate) -> Select:
    return predicate.apply(select(func.count().label("total")).select_from(LogEntry))


def _log_page(items: List[LogEntry], total: int, page: int, limit: int) -> LogPage:
    return LogPage(
        items=items,
        current_page=page,
        total_pages=math.ceil(total / limit),
        total_items=total,
        items_per_page=limit,
    )


def query_logs(
    db: Session,
    predicate: LogPredicate = MATCH_ALL,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> LogPage:
    """Fetch one page of matching entries, newest first, plus the total count.

    Entries with equal ``created_at`` are ordered by id, newest insert first.
    The page and the count are two separate reads, so a write committed in
    between shows up in one but not the other; see ``query_logs_snapshot``.
    """
    _check_paging(page, limit)

    try:
        items = list(db.scalars(_page_statement(predicate, page, limit)))
        total = db.scalar(_count_statement(predicate)) or 0
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreUnavailable("Failed to fetch logs") from exc

    return _log_page(items, total, page, limit)


def query_logs_snapshot(
    store: LogStore,
    predicate: LogPredicate = MATCH_ALL,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> LogPage:
    """Same as ``query_logs`` but the page and the total come from one read.

    The count is joined to the page in a single statement, inside a snapshot
    transaction, so both describe the same state of the table even while
    other sessions are writing.
    """
    _check_paging(page, limit)

    totals = _count_statement(predicate).subquery()
    page_rows = _page_statement(predicate, page, limit).subquery()
    entry = aliased(LogEntry, page_rows)
    # Always yields at least one row (the total), with a NULL entry past the end
    stmt = (
        select(totals.c.total, entry)
        .select_from(totals)
        .outerjoin(page_rows, true())
        .order_by(entry.created_at.desc(), entry.id.desc())
    )

    try:
        with store.snapshot() as db:
            rows = db.execute(stmt).all()
            items = [row[1] for row in rows if row[1] is not None]
            # Detach before the snapshot is rolled back so the rows stay loaded
            db.expunge_all()
    except SQLAlchemyError as exc:
        raise StoreUnavailable("Failed to fetch logs") from exc

    total = rows[0][0] if rows else 0
    return _log_page(items, total or 0, page, limit)
