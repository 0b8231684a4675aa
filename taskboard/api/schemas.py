"""Pydantic schemas for API responses."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models.enums import TaskStatus, TaskPriority, TaskLabel


class TaskRead(BaseModel):
    """Task response schema."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    title: Optional[str] = None
    status: TaskStatus
    label: TaskLabel
    priority: TaskPriority
    created_at: datetime
    updated_at: datetime


class TasksPage(BaseModel):
    """One page of the task list plus the number of pages."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: List[TaskRead] = []
    page_count: int = 0

    @classmethod
    def empty(cls) -> "TasksPage":
        return cls(data=[], page_count=0)


StatusCounts = Dict[TaskStatus, int]
PriorityCounts = Dict[TaskPriority, int]
