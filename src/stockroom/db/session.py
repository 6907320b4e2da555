"""Database session management.

Provides a cached engine and session factory per SQLite file, with
thread-safety settings suitable for FastAPI's threadpool.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from stockroom.config import get_settings
from stockroom.db.schema import Base

# Engines and factories keyed by resolved db path
_engine_cache: dict[str, Engine] = {}
_session_factory_cache: dict[str, sessionmaker] = {}


def _resolve(db_path: Path | None) -> Path:
    return Path(db_path) if db_path is not None else get_settings().db_path


def get_engine(db_path: Path | None = None) -> Engine:
    """Get the (cached) SQLAlchemy engine for a database file.

    Args:
        db_path: Path to SQLite file. Defaults to STOCKROOM_DB_PATH.

    Returns:
        SQLAlchemy engine instance.
    """
    db_path = _resolve(db_path)
    cache_key = str(db_path.resolve())

    engine = _engine_cache.get(cache_key)
    if engine is None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{db_path}",
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        _engine_cache[cache_key] = engine

    return engine


def get_session(db_path: Path | None = None) -> Session:
    """Open a new session. Caller closes it.

    Args:
        db_path: Path to SQLite file.

    Returns:
        SQLAlchemy Session instance.
    """
    db_path = _resolve(db_path)
    cache_key = str(db_path.resolve())

    factory = _session_factory_cache.get(cache_key)
    if factory is None:
        factory = sessionmaker(bind=get_engine(db_path))
        _session_factory_cache[cache_key] = factory

    return factory()


@contextmanager
def session_scope(db_path: Path | None = None) -> Generator[Session, None, None]:
    """Session that commits on success and rolls back on error.

    Example:
        with session_scope() as session:
            repo.set_option(session, "site", name, value)
    """
    session = get_session(db_path)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(db_path: Path | None = None) -> None:
    """Create all tables if they do not exist."""
    Base.metadata.create_all(get_engine(db_path))
