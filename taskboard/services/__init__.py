"""Service layer: task queries and mutations."""
