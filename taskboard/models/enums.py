"""Task enumerations.

These enums are the closed value sets for the task columns. They are used
by the database model, the search parameter parser and the API schemas.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Workflow status of a task."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"
    CANCELED = "canceled"


class TaskPriority(str, Enum):
    """Priority of a task."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskLabel(str, Enum):
    """Kind of work a task tracks."""

    BUG = "bug"
    FEATURE = "feature"
    ENHANCEMENT = "enhancement"
    DOCUMENTATION = "documentation"


def enum_values(enum_cls) -> list:
    """Return the raw string values of an enum, in declaration order."""
    return [member.value for member in enum_cls]
