"""Database package."""
from regain.db.database import Base, async_session_maker, engine, get_db, init_db

__all__ = ["Base", "async_session_maker", "engine", "get_db", "init_db"]
