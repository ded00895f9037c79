"""Database infrastructure - connection, models, and session management."""

from users_api.infrastructure.database.connection import (
    AsyncSessionFactory,
    close_db,
    create_tables,
    get_db,
    init_db,
)

__all__ = ["init_db", "close_db", "create_tables", "get_db", "AsyncSessionFactory"]
