"""Database connection pool."""

from src.shared.db.connection import ConnectionPool

__all__ = [
    "ConnectionPool",
]
