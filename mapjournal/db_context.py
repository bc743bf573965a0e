"""
Pool registry and the connection bound to the running task.

A service call opens one unit of work; every repository call inside it runs on
the same connection through `DatabaseOperations`.
"""

import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any

import asyncpg

from mapjournal.errors import ConflictError, InternalError, PersistenceError

logger = logging.getLogger(__name__)

_current_connection: ContextVar[asyncpg.Connection | None] = ContextVar(
    "current_connection", default=None
)
_db_pools: dict[str, asyncpg.Pool] = {}

# Failures raised while acquiring, beginning or committing, outside any statement
_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class DatabaseManager:
    """Named asyncpg pools and the per-task connection"""

    @classmethod
    async def add_pool(cls, name: str, pool: asyncpg.Pool):
        _db_pools[name] = pool

    @classmethod
    async def get_pool(cls, name: str = "default") -> asyncpg.Pool:
        if name not in _db_pools:
            raise ValueError(f"Database pool '{name}' not found")
        return _db_pools[name]

    @classmethod
    def remove_pool(cls, name: str) -> asyncpg.Pool | None:
        return _db_pools.pop(name, None)

    @classmethod
    def get_current_connection(cls) -> asyncpg.Connection | None:
        return _current_connection.get()

    @classmethod
    def log_query(cls, query: str, params: list[Any]):
        logger.debug("SQL: %s params=%r", query, params)

    @classmethod
    @asynccontextmanager
    async def transaction(cls, db_name: str = "default"):
        """Run the enclosed block in a database transaction.

        With a connection already bound, a savepoint is opened on it. Otherwise a
        connection is taken from the named pool and bound for the duration of the
        block; it is returned to the pool however the block exits.
        """
        current_conn = _current_connection.get()
        if current_conn:
            async with current_conn.transaction():
                yield current_conn
            return

        pool = await cls.get_pool(db_name)
        async with pool.acquire() as conn, conn.transaction():
            token = _current_connection.set(conn)
            try:
                yield conn
            finally:
                _current_connection.reset(token)


@asynccontextmanager
async def unit_of_work(db_name: str, operation: str, failure_message: str):
    """Transaction whose storage failures surface as InternalError(failure_message).

    Statement failures arrive already translated and logged by
    DatabaseOperations. Driver errors from the transaction boundary itself
    (pool acquire, BEGIN, COMMIT) are logged here.
    """
    try:
        async with DatabaseManager.transaction(db_name):
            yield
    except (PersistenceError, ConflictError) as e:
        logger.warning("%s failed: %s", operation, e.message)
        raise InternalError(failure_message) from e
    except _DRIVER_ERRORS as e:
        logger.exception("%s failed at the transaction boundary", operation)
        raise InternalError(failure_message) from e
