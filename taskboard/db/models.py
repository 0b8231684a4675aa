"""SQLAlchemy database models for Taskboard."""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    Enum,
    Index,
)
from sqlalchemy.orm import DeclarativeBase

from ..models.enums import TaskStatus, TaskPriority, TaskLabel, enum_values


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


def _enum_column(enum_cls, name: str, default):
    # Store the enum's value ("in-progress"), not its member name
    return Column(
        Enum(
            enum_cls,
            name=name,
            values_callable=enum_values,
            native_enum=False,
            validate_strings=True,
            length=30,
        ),
        nullable=False,
        default=default,
    )


class Task(Base):
    """A task shown in the task list view."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    title = Column(String(255))
    status = _enum_column(TaskStatus, "task_status", TaskStatus.TODO)
    label = _enum_column(TaskLabel, "task_label", TaskLabel.BUG)
    priority = _enum_column(TaskPriority, "task_priority", TaskPriority.LOW)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_tasks_status", "status"),
        Index("ix_tasks_priority", "priority"),
        Index("ix_tasks_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Task id={self.id} status={self.status} priority={self.priority}>"
