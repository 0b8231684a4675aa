"""Task create/update/delete.

Every successful write invalidates the ``tasks`` cache tag so cached list
pages and counts are recomputed on the next read.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..api.schemas import TaskRead
from ..api.validations import CreateTaskSchema, UpdateTaskSchema
from ..core.cache import invalidate_tag, CACHE_TAG_TASKS
from ..core.logging import get_logger, log_event, LogEvent
from ..db.models import Task

logger = get_logger(__name__)


class TaskNotFoundError(LookupError):
    """No task with the given id."""

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


def _invalidate_task_cache(reason: str) -> None:
    removed = invalidate_tag(CACHE_TAG_TASKS)
    log_event(
        LogEvent.CACHE_INVALIDATED,
        f"Invalidated {removed} cached task entries",
        level="DEBUG",
        tag=CACHE_TAG_TASKS,
        reason=reason,
    )


def _get_task_or_raise(db: Session, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


def create_task(db: Session, data: CreateTaskSchema) -> TaskRead:
    """Insert a task and return it."""
    task = Task(
        title=data.title,
        label=data.label,
        status=data.status,
        priority=data.priority,
    )
    try:
        db.add(task)
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        db.rollback()
        logger.error("Failed to create task", exc_info=True)
        raise

    _invalidate_task_cache("create")
    log_event(LogEvent.TASK_CREATED, f"Task {task.id} created", task_id=task.id)
    return TaskRead.model_validate(task)


def update_task(db: Session, task_id: int, data: UpdateTaskSchema) -> TaskRead:
    """Apply the fields set in ``data`` to a task and return it."""
    task = _get_task_or_raise(db, task_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return TaskRead.model_validate(task)

    for field, value in changes.items():
        setattr(task, field, value)
    try:
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to update task {task_id}", exc_info=True)
        raise

    _invalidate_task_cache("update")
    log_event(
        LogEvent.TASK_UPDATED,
        f"Task {task_id} updated",
        task_id=task_id,
        fields=sorted(changes),
    )
    return TaskRead.model_validate(task)


def delete_task(db: Session, task_id: int) -> None:
    """Delete a task."""
    task = _get_task_or_raise(db, task_id)
    try:
        db.delete(task)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to delete task {task_id}", exc_info=True)
        raise

    _invalidate_task_cache("delete")
    log_event(LogEvent.TASK_DELETED, f"Task {task_id} deleted", task_id=task_id)
