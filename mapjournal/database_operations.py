import logging
from typing import Any

import asyncpg

from mapjournal.db_context import DatabaseManager
from mapjournal.errors import ConflictError, PersistenceError

logger = logging.getLogger(__name__)


class DatabaseOperations:
    """Composition class for database operations.

    Driver exceptions are translated here, at the point of the store call, so
    nothing above this layer sees asyncpg errors.
    """

    @staticmethod
    def get_connection() -> asyncpg.Connection:
        """Get the current database connection from context"""
        conn = DatabaseManager.get_current_connection()
        if not conn:
            raise ValueError(
                "No active transaction found. Repository methods must be called within a transaction context."
            )
        return conn

    @staticmethod
    def _translate(query: str, error: Exception) -> Exception:
        if isinstance(error, asyncpg.UniqueViolationError):
            logger.warning("Unique constraint violated by query: %s", query)
            return ConflictError()
        logger.exception("Query failed: %s", query)
        return PersistenceError()

    async def fetch_all(self, query: str, params: list[Any]) -> list[Any]:
        conn = self.get_connection()
        DatabaseManager.log_query(query, params)
        try:
            return await conn.fetch(query, *params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            raise self._translate(query, e) from e

    async def fetch_one(self, query: str, params: list[Any]) -> Any:
        conn = self.get_connection()
        DatabaseManager.log_query(query, params)
        try:
            return await conn.fetchrow(query, *params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            raise self._translate(query, e) from e

    async def fetch_value(self, query: str, params: list[Any]) -> Any:
        conn = self.get_connection()
        DatabaseManager.log_query(query, params)
        try:
            return await conn.fetchval(query, *params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            raise self._translate(query, e) from e

    async def execute_query(self, query: str, params: list[Any]) -> str:
        """Execute query and return the status string, e.g. 'DELETE 1'"""
        conn = self.get_connection()
        DatabaseManager.log_query(query, params)
        try:
            return await conn.execute(query, *params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            raise self._translate(query, e) from e
