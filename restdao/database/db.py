"""
Database engine configuration.

This module builds the SQLAlchemy engine the DAOs run their queries on.
The engine is created once at startup and disposed at shutdown by the
application; DAOs only borrow connections from it.
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from restdao.utils.config import get_settings
from restdao.utils.logger import get_logger

logger = get_logger(__name__)


def _is_in_memory_sqlite(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:") or ":memory:" in database_url


def get_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create a SQLAlchemy engine.

    SQLite connections may be used from several threads, and an in-memory
    SQLite database is shared through a single connection so that every
    DAO sees the same data.

    Args:
        database_url: Database URL, defaults to the DATABASE_URL setting
        echo: Log SQL statements, defaults to the ECHO_SQL setting

    Returns:
        Engine: SQLAlchemy engine
    """
    settings = get_settings()
    database_url = database_url or settings.DATABASE_URL
    echo = settings.ECHO_SQL if echo is None else echo

    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_in_memory_sqlite(database_url):
            kwargs["poolclass"] = StaticPool
        db_type = "SQLite"
    else:
        db_type = "PostgreSQL" if database_url.startswith("postgresql") else database_url.split(":", 1)[0]

    logger.info(f"Using {db_type} database")
    return create_engine(database_url, echo=echo, **kwargs)
