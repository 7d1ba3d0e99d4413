"""Database helpers for the SQL snapshot backend."""

from .session import Base, get_engine, get_session, resolve_database_url

__all__ = ["Base", "get_engine", "get_session", "resolve_database_url"]
