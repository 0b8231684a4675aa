"""Database connection and session management."""

from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool, QueuePool

from ..config import get_settings

settings = get_settings()

# Configure engine based on database type
if settings.is_sqlite():
    # SQLite configuration (for testing and local development)
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    # PostgreSQL configuration with configurable connection pool
    engine = create_engine(
        settings.database_url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_pool_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=settings.db_pool_pre_ping,
    )

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def read_transaction(db: Session) -> Iterator[Session]:
    """Run a group of reads inside one transaction.

    An idle session gets a transaction that ends when the block exits
    (rolled back on error). A session that is already inside a transaction
    is used as is, so the reads share the caller's transaction.
    """
    if db.in_transaction():
        yield db
        return
    with db.begin():
        yield db


def get_pool_status() -> dict:
    """Get connection pool status for monitoring.

    Returns a dict with pool metrics. For SQLite, returns minimal info.
    """
    pool = engine.pool
    if settings.is_sqlite():
        return {
            "pool_type": "StaticPool",
            "note": "SQLite uses StaticPool",
        }

    return {
        "pool_type": "QueuePool",
        "pool_size": pool.size(),
        "checked_in": pool.checkedin(),
        "checked_out": pool.checkedout(),
        "overflow": pool.overflow(),
        "max_overflow": settings.db_pool_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
    }
