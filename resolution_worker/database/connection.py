from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool

from resolution_worker.config.settings import Settings

APPLICATION_NAME = "resolution-worker"

_pool: ConnectionPool | None = None


def build_conninfo(settings: Settings) -> str:
    """libpq connection string for the case store. Values are quoted by psycopg."""
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
        connect_timeout=settings.db_connect_timeout_seconds,
        application_name=APPLICATION_NAME,
    )


def init_pool(settings: Settings) -> None:
    """Open the global connection pool.

    Connections are established in the background; a store that is down
    surfaces on the first ``get_connection`` as ``PoolTimeout``.
    """
    global _pool  # noqa: PLW0603
    _pool = ConnectionPool(
        build_conninfo(settings),
        min_size=1,
        max_size=settings.db_pool_max_size,
        timeout=settings.db_connect_timeout_seconds,
        open=True,
    )


def close_pool() -> None:
    """Close the global connection pool."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a pooled connection. Caller manages commit/rollback.

    Raises:
        RuntimeError: if ``init_pool`` has not been called.
        psycopg_pool.PoolTimeout: if no connection becomes available in time.
    """
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn
