"""Tests for sample data generation."""

import random
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from taskboard.db.models import Task
from taskboard.db.seed import generate_tasks, seed_tasks
from taskboard.models.enums import TaskStatus, TaskPriority, TaskLabel


def test_generate_tasks_is_deterministic_with_seed():
    now = datetime(2024, 6, 1)
    a = generate_tasks(5, rng=random.Random(42), now=now)
    b = generate_tasks(5, rng=random.Random(42), now=now)

    assert [t.title for t in a] == [t.title for t in b]
    assert [t.created_at for t in a] == [t.created_at for t in b]


def test_generated_values_are_valid():
    now = datetime(2024, 6, 1)
    tasks = generate_tasks(50, rng=random.Random(1), now=now)

    for task in tasks:
        assert task.status in TaskStatus
        assert task.priority in TaskPriority
        assert task.label in TaskLabel
        assert now - timedelta(days=90) <= task.created_at <= now


def test_seed_tasks_inserts_rows(db: Session):
    assert seed_tasks(db, 7, rng=random.Random(3)) == 7
    assert db.query(Task).count() == 7
