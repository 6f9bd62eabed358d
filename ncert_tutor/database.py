"""
Database engine, session factory, and metadata shared across the application.
"""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ncert_tutor.config import DATA_DIR, DATABASE_URL

logger = logging.getLogger(__name__)

Base = declarative_base()


def _add_sqlite_locking(engine: Engine) -> None:
    """
    Make every SQLite transaction take the write lock at BEGIN.

    pysqlite defers BEGIN until the first write and SQLite ignores
    SELECT ... FOR UPDATE, so a booking's conflict check would otherwise run
    outside any lock. Starting with BEGIN IMMEDIATE serialises whole
    transactions instead.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        # Hand transaction control to SQLAlchemy
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    """Create an engine; SQLite connections may be shared across threads."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if url.startswith(f"sqlite:///{DATA_DIR}"):
            DATA_DIR.mkdir(parents=True, exist_ok=True)
        engine = create_engine(url, **kwargs)
        _add_sqlite_locking(engine)
        return engine

    kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


engine = make_engine()

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(bind: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    # Models must be imported so they register on Base.metadata
    from ncert_tutor.booking import models  # noqa: F401

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info("Database tables ready (%s)", target.url.render_as_string(hide_password=True))
