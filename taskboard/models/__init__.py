"""Shared task enumerations.

Usage:
    from taskboard.models import TaskStatus, TaskPriority, TaskLabel
"""

from taskboard.models.enums import (
    TaskStatus,
    TaskPriority,
    TaskLabel,
    enum_values,
)

__all__ = [
    "TaskStatus",
    "TaskPriority",
    "TaskLabel",
    "enum_values",
]
