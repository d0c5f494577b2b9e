"""
SQLAlchemy engine singleton for the sync job.

The job opens one connection per run (a single transaction for all writes),
so the pool is kept small. pool_pre_ping guards against connections dropped
between scheduled runs of a long-lived worker.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from sync_pms.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")

engine: Engine = create_engine(
    DATABASE_URL,
    future=True,
    pool_size=2,
    max_overflow=2,
    pool_pre_ping=True,  # Verify connections before using
    pool_recycle=3600,
    echo=False,
)


def check_engine_health(db_engine: Engine = engine) -> bool:
    """
    Check if the database is reachable.

    Used by the CLI before a run starts so an unreachable database fails
    fast, before any PMS requests are spent.

    Returns:
        bool: True if a trivial query succeeds, False otherwise
    """
    try:
        with db_engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
