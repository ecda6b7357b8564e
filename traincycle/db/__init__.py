"""Database package."""
from traincycle.db.database import (
    Base,
    async_session_maker,
    close_engine,
    configure_sqlite,
    create_primary_engine,
    engine,
    get_db,
    init_db,
)

__all__ = [
    "Base",
    "async_session_maker",
    "close_engine",
    "configure_sqlite",
    "create_primary_engine",
    "engine",
    "get_db",
    "init_db",
]
