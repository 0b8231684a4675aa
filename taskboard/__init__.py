"""Taskboard - paginated, filtered task list queries with caching."""

__version__ = "0.1.0"
