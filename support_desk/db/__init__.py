"""Database module."""

from support_desk.db.base import Base
from support_desk.db.session import async_session_maker, engine, init_db

__all__ = ["Base", "async_session_maker", "engine", "init_db"]
