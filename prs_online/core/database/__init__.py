"""
Database layer for PRS Online.

Structure:
- entities/: SQLModel table models (users, profiles, countries, firms,
  practice reviews, upcoming review notices)
- repositories/: Async data access objects, one per aggregate
- session.py: Global engine and session factory management
- utils.py: Engine/session factory helpers
"""

from .base import Base, utc_now_naive
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "utc_now_naive",
]
