"""Task list queries.

Two layers live here:

1. Composers (``fetch_tasks``, ``fetch_task_status_counts``,
   ``fetch_task_priority_counts``) build and run the SQL and return a
   ``QueryResult``: either the data, or the ``TaskQueryError`` that stopped
   them. They never raise for bad dates or database errors.
2. Cached adapters (``get_tasks``, ``get_task_status_counts``,
   ``get_task_priority_counts``) put the composers behind the cache, log
   failures and turn them into the empty result the list view expects
   (``{"data": [], "pageCount": 0}`` or ``{}``). Failed results are never
   cached.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic.alias_generators import to_camel
from sqlalchemy import and_, asc, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..api.schemas import TaskRead, TasksPage, StatusCounts, PriorityCounts
from ..api.validations import GetTasksParams
from ..config import get_settings
from ..core.cache import (
    cached,
    make_cache_key,
    CACHE_PREFIX_TASKS,
    CACHE_KEY_TASK_STATUS_COUNTS,
    CACHE_KEY_TASK_PRIORITY_COUNTS,
    CACHE_TAG_TASKS,
)
from ..core.logging import get_logger, LogEvent
from ..db.database import read_transaction
from ..db.models import Task

logger = get_logger(__name__)

T = TypeVar("T")


class TaskQueryError(Exception):
    """Base class for task query failures."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvalidQueryParameter(TaskQueryError):
    """A parameter passed validation but cannot be used in a query."""

    def __init__(self, name: str, value: Any, reason: str):
        super().__init__(f"{name}={value!r}: {reason}")
        self.name = name
        self.value = value


class QueryExecutionError(TaskQueryError):
    """The database failed to run the query or returned rows that cannot be loaded."""

    def __init__(self, operation: str, error: Exception):
        super().__init__(f"{operation} failed: {error.__class__.__name__}: {error}")
        self.operation = operation
        self.original = error


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Outcome of a composer: a value on success, an error on failure."""

    value: Optional[T] = None
    error: Optional[TaskQueryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "QueryResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: TaskQueryError) -> "QueryResult[T]":
        return cls(error=error)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default


def _sortable_columns() -> Dict[str, Any]:
    columns = {}
    for column in Task.__table__.columns:
        columns[column.key] = column
        columns[to_camel(column.key)] = column
    return columns


# Sort keys accepted as "createdAt" or "created_at"
SORTABLE_COLUMNS = _sortable_columns()


def build_order_by(sort: Optional[str]) -> List[Any]:
    """Turn a ``column.direction`` sort spec into ORDER BY clauses.

    Unknown or missing columns sort by id descending. Any direction other
    than ``asc`` sorts descending. Non-id columns get id as a tie-breaker in
    the same direction.
    """
    parts = [part for part in (sort or "").split(".") if part]
    column = SORTABLE_COLUMNS.get(parts[0]) if parts else None
    if column is None:
        return [desc(Task.id)]

    direction = parts[1] if len(parts) > 1 else None
    order = asc if direction == "asc" else desc
    clauses = [order(column)]
    if column.key != "id":
        clauses.append(order(Task.id))
    return clauses


def parse_date_bound(name: str, value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime into naive UTC. Empty means no bound."""
    if not value:
        return None
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise InvalidQueryParameter(name, value, "not an ISO-8601 date")
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            raise InvalidQueryParameter(name, value, "out of the supported date range")
    return parsed


def build_task_filters(params: GetTasksParams) -> List[Any]:
    """Build the WHERE conditions for a task list query (joined with AND)."""
    from_date = parse_date_bound("from", params.from_date)
    to_date = parse_date_bound("to", params.to_date)

    conditions = []
    if params.title:
        conditions.append(Task.title.icontains(params.title, autoescape=True))
    if params.status:
        conditions.append(Task.status.in_(params.status))
    if params.priority:
        conditions.append(Task.priority.in_(params.priority))
    if from_date is not None:
        conditions.append(Task.created_at >= from_date)
    if to_date is not None:
        conditions.append(Task.created_at <= to_date)
    return conditions


# LookupError: a stored enum value the model does not know.
# ValueError: a row that does not validate as TaskRead.
_EXECUTION_ERRORS = (SQLAlchemyError, LookupError, ValueError)


def _where(stmt, conditions):
    return stmt.where(and_(*conditions)) if conditions else stmt


def fetch_tasks(db: Session, params: GetTasksParams) -> QueryResult[TasksPage]:
    """Fetch one page of tasks and the page count.

    The page and the total are read in the same transaction so the count
    matches the rows it was computed alongside.
    """
    try:
        conditions = build_task_filters(params)
    except InvalidQueryParameter as e:
        return QueryResult.failure(e)

    offset = (params.page - 1) * params.per_page
    rows_stmt = (
        _where(select(Task), conditions)
        .order_by(*build_order_by(params.sort))
        .limit(params.per_page)
        .offset(offset)
    )
    count_stmt = _where(select(func.count()).select_from(Task), conditions)

    try:
        with read_transaction(db):
            data = [TaskRead.model_validate(task) for task in db.scalars(rows_stmt)]
            total = db.scalar(count_stmt) or 0
    except _EXECUTION_ERRORS as e:
        return QueryResult.failure(QueryExecutionError("task list query", e))

    page_count = math.ceil(total / params.per_page)
    return QueryResult.success(TasksPage(data=data, page_count=page_count))


def _count_by(db: Session, column, operation: str) -> QueryResult[Dict[Any, int]]:
    count = func.count(Task.id)
    stmt = select(column, count).group_by(column).having(count > 0)
    try:
        with read_transaction(db):
            rows = db.execute(stmt).all()
    except _EXECUTION_ERRORS as e:
        return QueryResult.failure(QueryExecutionError(operation, e))

    counts = {}
    for value, total in rows:
        if total > 0:
            counts[value] = total
    return QueryResult.success(counts)


def fetch_task_status_counts(db: Session) -> QueryResult[StatusCounts]:
    """Count tasks per status. Statuses with no tasks are absent."""
    return _count_by(db, Task.status, "task status counts")


def fetch_task_priority_counts(db: Session) -> QueryResult[PriorityCounts]:
    """Count tasks per priority. Priorities with no tasks are absent."""
    return _count_by(db, Task.priority, "task priority counts")


def _tasks_ttl() -> int:
    return get_settings().cache_ttl_tasks


def _succeeded(result: QueryResult) -> bool:
    return result.ok


def tasks_cache_key(params: GetTasksParams, db: Optional[Session] = None) -> str:
    return make_cache_key(CACHE_PREFIX_TASKS, params=params.cache_payload())


@cached(tasks_cache_key, ttl=_tasks_ttl, tags=[CACHE_TAG_TASKS], cache_if=_succeeded)
def _cached_tasks(params: GetTasksParams, db: Session) -> QueryResult[TasksPage]:
    return fetch_tasks(db, params)


@cached(CACHE_KEY_TASK_STATUS_COUNTS, ttl=_tasks_ttl, tags=[CACHE_TAG_TASKS], cache_if=_succeeded)
def _cached_status_counts(db: Session) -> QueryResult[StatusCounts]:
    return fetch_task_status_counts(db)


@cached(CACHE_KEY_TASK_PRIORITY_COUNTS, ttl=_tasks_ttl, tags=[CACHE_TAG_TASKS], cache_if=_succeeded)
def _cached_priority_counts(db: Session) -> QueryResult[PriorityCounts]:
    return fetch_task_priority_counts(db)


def _log_failure(event_type: str, operation: str, error: TaskQueryError, **fields) -> None:
    logger.error(
        f"{operation} failed, returning empty result: {error.reason}",
        exc_info=error,
        extra={
            "event_type": event_type,
            "operation": operation,
            "error_type": error.__class__.__name__,
            "reason": error.reason,
            **fields,
        },
    )


def get_tasks(params: GetTasksParams, db: Session) -> TasksPage:
    """Cached task list page. Failures are logged and yield an empty page."""
    result = _cached_tasks(params, db)
    if result.ok:
        return result.value.model_copy(deep=True)
    _log_failure(
        LogEvent.TASK_QUERY_FAILED,
        "get_tasks",
        result.error,
        page=params.page,
        per_page=params.per_page,
        sort=params.sort,
    )
    return TasksPage.empty()


def get_task_status_counts(db: Session) -> StatusCounts:
    """Cached task counts per status. Failures are logged and yield ``{}``."""
    result = _cached_status_counts(db)
    if result.ok:
        return dict(result.value)
    _log_failure(LogEvent.TASK_COUNTS_FAILED, "get_task_status_counts", result.error)
    return {}


def get_task_priority_counts(db: Session) -> PriorityCounts:
    """Cached task counts per priority. Failures are logged and yield ``{}``."""
    result = _cached_priority_counts(db)
    if result.ok:
        return dict(result.value)
    _log_failure(LogEvent.TASK_COUNTS_FAILED, "get_task_priority_counts", result.error)
    return {}
