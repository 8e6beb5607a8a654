"""
sentinel.database.engine — Database Connection & Async Helper
==============================================================

**Why this file exists:**
The greeting ledger must survive restarts, so it lives in a database.
SQLAlchemy is synchronous; calling it straight from a Discord event
handler would freeze the gateway loop while the query runs.

Every DB call from async code goes through :func:`run_db`, which ships the
synchronous function to a thread via ``asyncio.to_thread()``.

Usage::

    from sentinel.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # reads DATABASE_URL from .env
    init_db(engine)                      # CREATE TABLE IF NOT EXISTS …

    # Inside an async Cog method:
    members = await run_db(store.load)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from sentinel.database.models import Base

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

DEFAULT_DATABASE_URL = "sqlite:///sentinel.db"


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine(url: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine` from *url* or ``DATABASE_URL``.

    Falls back to a local SQLite file, which is plenty for one guild's
    ledger.  Server databases get a small connection pool:
    * ``pool_size=2`` — the ledger sees a handful of writes per day.
    * ``pool_timeout=10`` — fail after 10 s if no connection is available.
    * ``pool_recycle=3600`` — recycle connections after 1 hour.
    """
    url = url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL

    if url.startswith("sqlite"):
        engine = create_engine(url, echo=False)
    else:
        engine = create_engine(
            url,
            echo=False,
            pool_size=2,
            max_overflow=2,
            pool_pre_ping=True,   # Reconnect stale connections automatically
            pool_timeout=10,
            pool_recycle=3600,
        )
    logger.info("Database engine created → %s", engine.url.render_as_string(hide_password=True))
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create all tables defined in :mod:`sentinel.database.models`.

    Safe on every startup.  In production the schema is managed by Alembic
    (``alembic upgrade head``); this is the fallback for fresh SQLite files.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that commits on success and rolls back on exception."""
    session = Session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a **synchronous** database (or file) function on a background thread.

    Parameters
    ----------
    func:
        Any sync callable (typically a store method that opens a session).
    *args, **kwargs:
        Forwarded to *func*.
    """
    return await asyncio.to_thread(func, *args, **kwargs)
