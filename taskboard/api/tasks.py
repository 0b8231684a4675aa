"""Task API routes."""

from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.database import get_db
from ..models.enums import TaskStatus, TaskPriority
from ..services.task_mutations import (
    TaskNotFoundError,
    create_task,
    update_task,
    delete_task,
)
from ..services.task_queries import (
    get_tasks,
    get_task_status_counts,
    get_task_priority_counts,
)
from .schemas import TaskRead, TasksPage
from .validations import CreateTaskSchema, UpdateTaskSchema, parse_search_params

router = APIRouter()


def _validation_detail(error: ValidationError) -> list:
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in error.errors()
    ]


@router.get("", response_model=TasksPage)
async def list_tasks(request: Request, db: Session = Depends(get_db)):
    """Get one page of tasks.

    Query parameters: page, perPage, sort (``column.direction``), title,
    status and priority (comma-separated), from, to, filters (JSON).
    """
    try:
        params = parse_search_params(request.query_params)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_validation_detail(e),
        )
    return get_tasks(params, db)


@router.get("/status-counts", response_model=Dict[TaskStatus, int])
async def task_status_counts(db: Session = Depends(get_db)):
    """Get the number of tasks per status."""
    return get_task_status_counts(db)


@router.get("/priority-counts", response_model=Dict[TaskPriority, int])
async def task_priority_counts(db: Session = Depends(get_db)):
    """Get the number of tasks per priority."""
    return get_task_priority_counts(db)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task_route(data: CreateTaskSchema, db: Session = Depends(get_db)):
    """Create a task."""
    try:
        return create_task(db, data)
    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Failed to create task")


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task_route(
    task_id: int,
    data: UpdateTaskSchema,
    db: Session = Depends(get_db),
):
    """Update some fields of a task."""
    try:
        return update_task(db, task_id, data)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Failed to update task")


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task_route(task_id: int, db: Session = Depends(get_db)):
    """Delete a task."""
    try:
        delete_task(db, task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Failed to delete task")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
