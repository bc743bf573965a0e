import asyncpg
import pytest
import pytest_asyncio
from testcontainers.postgres import PostgresContainer

from mapjournal.db_context import DatabaseManager
from mapjournal.post_entities import AuthUser
from mapjournal.schema import create_schema, truncate_all
from tests.post_factory import TEST_DB


@pytest.fixture(scope="session")
def postgres_container():
    """Start a PostgreSQL test container for the session."""
    with PostgresContainer("postgres:17") as postgres:
        yield postgres


@pytest_asyncio.fixture
async def test_db_pool(postgres_container):
    """Pool against the test container, with a fresh schema for each test."""
    host = postgres_container.get_container_host_ip()
    port = postgres_container.get_exposed_port(5432)
    dsn = f"postgresql://{postgres_container.username}:{postgres_container.password}@{host}:{port}/{postgres_container.dbname}"

    # A new pool per test avoids sharing connections across event loops
    pool = await asyncpg.create_pool(dsn, min_size=1, max_size=5)
    await DatabaseManager.add_pool(TEST_DB, pool)
    await create_schema(TEST_DB)

    yield pool

    await truncate_all(TEST_DB)
    DatabaseManager.remove_pool(TEST_DB)
    await pool.close()


@pytest_asyncio.fixture
async def users(test_db_pool) -> list[AuthUser]:
    """Two registered users: an owner and somebody else."""
    async with test_db_pool.acquire() as conn:
        rows = await conn.fetch(
            "INSERT INTO users (email) VALUES ($1), ($2) RETURNING id, email",
            "owner@example.com",
            "other@example.com",
        )
    return [AuthUser(id=row["id"], email=row["email"]) for row in rows]


@pytest.fixture
def owner(users) -> AuthUser:
    return users[0]


@pytest.fixture
def other_user(users) -> AuthUser:
    return users[1]
