"""
Direct Postgres access to the database behind the Supabase project.

Table CRUD goes through the Supabase client so that row-level security
applies. This module is only for privileged maintenance statements that the
REST layer cannot express, such as creating storage policies.
"""

from __future__ import annotations

import os
import time
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from .config import get_active_config
from .logging_config import get_logger

logger = get_logger(__name__)

SLOW_QUERY_SECONDS = 1.0

_engine: Engine | None = None


def database_url() -> str:
    """``DATABASE_URL`` when set, else the URI built from the DB_* settings."""
    return os.getenv("DATABASE_URL") or get_active_config().sqlalchemy_uri


def _watch_slow_statements(engine: Engine) -> None:
    @event.listens_for(engine, "before_cursor_execute")
    def start_timer(conn, cursor, statement, parameters, context, executemany):
        context._washdesk_started = time.perf_counter()

    @event.listens_for(engine, "after_cursor_execute")
    def report_slow(conn, cursor, statement, parameters, context, executemany):
        elapsed = time.perf_counter() - context._washdesk_started
        if elapsed > SLOW_QUERY_SECONDS:
            logger.warning(f"Slow statement ({elapsed:.2f}s): {statement[:200]}")


def get_engine() -> Engine:
    """The process-wide engine, created on first use."""
    global _engine
    if _engine is not None:
        return _engine

    url = database_url()
    if url.startswith("sqlite"):
        engine = create_engine(
            url, connect_args={"check_same_thread": False}, poolclass=StaticPool
        )
    else:
        # maintenance traffic only; a small pool is enough
        engine = create_engine(url, pool_pre_ping=True, pool_size=2, max_overflow=2)

    _watch_slow_statements(engine)
    _engine = engine
    logger.info(f"Database engine ready ({engine.dialect.name})")
    return engine


def dispose_engine() -> None:
    """Drop the cached engine so the next ``get_engine`` builds a fresh one."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


@contextmanager
def transaction() -> Iterator[Connection]:
    """A connection inside one transaction, committed on success and rolled back on error."""
    with get_engine().begin() as connection:
        yield connection
