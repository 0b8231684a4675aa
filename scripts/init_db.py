#!/usr/bin/env python3
"""Initialize the database and optionally seed sample tasks.

Usage:
    python scripts/init_db.py

Environment variables:
    DATABASE_URL: database connection string
    SEED_TASKS: number of sample tasks to insert (default: 0)
"""

import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import SQLAlchemyError

from taskboard.core.cache import invalidate_tag, CACHE_TAG_TASKS
from taskboard.db.database import engine, SessionLocal
from taskboard.db.models import Base
from taskboard.db.seed import seed_tasks


def init_database():
    """Create all database tables."""
    print(f"Connecting to database: {engine.url.render_as_string(hide_password=True)}")
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")


def seed_sample_tasks(count: int):
    """Insert sample tasks."""
    session = SessionLocal()
    try:
        inserted = seed_tasks(session, count)
        invalidate_tag(CACHE_TAG_TASKS)
        print(f"Inserted {inserted} sample tasks")
    except SQLAlchemyError as e:
        session.rollback()
        print(f"Error seeding tasks: {e}")
        raise
    finally:
        session.close()


def main():
    """Main entry point."""
    print("=" * 60)
    print("Taskboard Database Initialization")
    print("=" * 60)
    print()

    try:
        init_database()
        count = int(os.environ.get("SEED_TASKS", "0"))
        if count > 0:
            seed_sample_tasks(count)

        print()
        print("Database initialization complete!")
        print("Start the API: uvicorn taskboard.main:app --host 0.0.0.0 --port 8000")
        print()

    except (SQLAlchemyError, ValueError) as e:
        print(f"\nFATAL ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
