"""
Filter predicate builder for audit log queries.

Query-string filters are turned into a ``LogPredicate``: an immutable tuple
of typed clauses. The paginated query applies the very same predicate object
to its page select and to its count select, so the two can never disagree
about which rows match.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Optional, Tuple, Union

from sqlalchemy import ColumnElement, Select, String, cast, or_

from auditlog.audit import clean_text
from auditlog.errors import InvalidInput
from auditlog.models import LogEntry


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_bound(value: Optional[str], name: str, end_of_day: bool = False) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime query value.

    A bare date (``2024-05-01``) means midnight UTC, or the last microsecond
    of that day when ``end_of_day`` is set. Naive datetimes are taken as UTC.
    """
    value = clean_text(value)
    if value is None:
        return None
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            parsed = datetime.combine(day, time.max if end_of_day else time.min)
        else:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidInput(f"{name} must be an ISO-8601 date or datetime")
    return _utc(parsed)


@dataclass(frozen=True)
class LogFilters:
    action: Optional[str] = None
    user: Optional[str] = None
    product: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @classmethod
    def from_params(
        cls,
        action: Optional[str] = None,
        user: Optional[str] = None,
        product: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> "LogFilters":
        """Build filters from raw query values; blank values count as absent."""
        return cls(
            action=clean_text(action),
            user=clean_text(user),
            product=clean_text(product),
            start_date=parse_bound(start_date, "startDate"),
            end_date=parse_bound(end_date, "endDate", end_of_day=True),
        )


# --- Clauses ---

@dataclass(frozen=True)
class ActionEquals:
    value: str

    def to_sql(self) -> ColumnElement:
        return LogEntry.action == self.value


@dataclass(frozen=True)
class UserMatches:
    """Email contains the term (any case), or the user id equals it as text."""
    term: str

    def to_sql(self) -> ColumnElement:
        return or_(
            LogEntry.user_email.icontains(self.term, autoescape=True),
            cast(LogEntry.user_id, String) == self.term,
        )


@dataclass(frozen=True)
class ProductMatches:
    term: str

    def to_sql(self) -> ColumnElement:
        return or_(
            LogEntry.product_name.icontains(self.term, autoescape=True),
            LogEntry.product_code.icontains(self.term, autoescape=True),
        )


@dataclass(frozen=True)
class CreatedFrom:
    at: datetime

    def to_sql(self) -> ColumnElement:
        return LogEntry.created_at >= self.at


@dataclass(frozen=True)
class CreatedUntil:
    at: datetime

    def to_sql(self) -> ColumnElement:
        return LogEntry.created_at <= self.at


Clause = Union[ActionEquals, UserMatches, ProductMatches, CreatedFrom, CreatedUntil]


@dataclass(frozen=True)
class LogPredicate:
    clauses: Tuple[Clause, ...] = ()

    def apply(self, stmt: Select) -> Select:
        """Narrow a select over ``logs``. No clauses leaves it untouched."""
        if not self.clauses:
            return stmt
        return stmt.where(*(clause.to_sql() for clause in self.clauses))


MATCH_ALL = LogPredicate()


def build_predicate(filters: Optional[LogFilters] = None) -> LogPredicate:
    if filters is None:
        return MATCH_ALL

    clauses = []
    if filters.action:
        clauses.append(ActionEquals(filters.action))
    if filters.user:
        clauses.append(UserMatches(filters.user))
    if filters.product:
        clauses.append(ProductMatches(filters.product))
    if filters.start_date:
        clauses.append(CreatedFrom(filters.start_date))
    if filters.end_date:
        clauses.append(CreatedUntil(filters.end_date))
    return LogPredicate(tuple(clauses))
