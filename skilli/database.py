"""
Engine, session factory and the request-scoped session dependency

PostgreSQL gets a tuned connection pool; SQLite (local runs and tests) gets a
thread-shareable connection with foreign keys switched on.
"""

import logging
import os
import time

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DATABASE_URL

logger = logging.getLogger(__name__)

IS_SQLITE = DATABASE_URL.startswith("sqlite")

LOG_SLOW_QUERIES = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
SLOW_QUERY_SECONDS = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))


def _pool_settings() -> dict:
    return {
        "pool_pre_ping": True,
        "pool_size": int(os.getenv("DB_POOL_SIZE", "20")),
        "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "30")),
        "pool_timeout": int(os.getenv("DB_POOL_TIMEOUT", "30")),
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE", "300")),
    }


def _build_engine():
    if IS_SQLITE:
        # Sync endpoints and dependencies run on FastAPI's threadpool
        return create_engine(DATABASE_URL, connect_args={"check_same_thread": False})

    settings = _pool_settings()
    logger.info(
        f"📊 Pool size={settings['pool_size']} overflow={settings['max_overflow']} "
        f"timeout={settings['pool_timeout']}s"
    )
    return create_engine(DATABASE_URL, **settings)


try:
    engine = _build_engine()
except Exception as e:
    logger.error(f"❌ Could not create database engine: {e}")
    raise
logger.info(f"✅ Database engine ready ({engine.dialect.name})")

if IS_SQLITE:

    @event.listens_for(engine, "connect")
    def enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if LOG_SLOW_QUERIES:

    @event.listens_for(engine, "before_cursor_execute")
    def start_query_timer(conn, _cursor, _statement, _parameters, _context, _executemany):
        conn.info.setdefault("query_started", []).append(time.perf_counter())

    @event.listens_for(engine, "after_cursor_execute")
    def report_slow_query(conn, _cursor, statement, _parameters, _context, _executemany):
        elapsed = time.perf_counter() - conn.info["query_started"].pop()
        if elapsed > SLOW_QUERY_SECONDS:
            logger.warning(f"🐌 Slow query ({elapsed:.2f}s): {statement[:200]}")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """One session per request; closing it discards anything left uncommitted"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
