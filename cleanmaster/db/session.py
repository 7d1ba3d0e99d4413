"""Engine/session helpers for the SQL snapshot backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from cleanmaster.core.config import get_settings

Base = declarative_base()


def resolve_database_url(url: Optional[str] = None) -> str:
    value = (url or get_settings().database_url or "").strip()
    if not value:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    return value


@lru_cache
def get_engine(url: Optional[str] = None) -> Engine:
    """Return one engine per database URL (defaults to DATABASE_URL)."""
    resolved = resolve_database_url(url)
    if resolved.startswith("sqlite"):
        return create_engine(resolved, future=True, connect_args={"check_same_thread": False})
    return create_engine(resolved, future=True, pool_pre_ping=True)


@lru_cache
def _get_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@contextmanager
def get_session(engine: Optional[Engine] = None) -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on error."""
    session: Session = _get_sessionmaker(engine or get_engine())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
