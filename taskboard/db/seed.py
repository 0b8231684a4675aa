"""Sample task data for local development."""

import random
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.enums import TaskStatus, TaskPriority, TaskLabel
from .models import Task

_VERBS = ["Fix", "Add", "Refactor", "Document", "Investigate", "Remove", "Update"]
_OBJECTS = [
    "login redirect",
    "pagination controls",
    "date range picker",
    "export to CSV",
    "status badge colors",
    "search debounce",
    "priority filter",
    "API error toast",
]


def generate_tasks(count: int, rng: Optional[random.Random] = None, now: Optional[datetime] = None) -> List[Task]:
    """Build ``count`` unsaved tasks with random enums and creation times in the last 90 days."""
    rng = rng or random.Random()
    now = now or datetime.utcnow()
    tasks = []
    for _ in range(count):
        created_at = now - timedelta(minutes=rng.randint(0, 90 * 24 * 60))
        tasks.append(
            Task(
                title=f"{rng.choice(_VERBS)} {rng.choice(_OBJECTS)}",
                status=rng.choice(list(TaskStatus)),
                label=rng.choice(list(TaskLabel)),
                priority=rng.choice(list(TaskPriority)),
                created_at=created_at,
                updated_at=created_at,
            )
        )
    return tasks


def seed_tasks(db: Session, count: int, rng: Optional[random.Random] = None) -> int:
    """Insert ``count`` generated tasks. Returns the number inserted."""
    tasks = generate_tasks(count, rng=rng)
    db.add_all(tasks)
    db.commit()
    return len(tasks)
