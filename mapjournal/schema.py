"""DDL for the tables the services read and write"""

from mapjournal.db_context import DatabaseManager

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        email VARCHAR(255) NOT NULL UNIQUE,
        red VARCHAR(255) NOT NULL DEFAULT '',
        yellow VARCHAR(255) NOT NULL DEFAULT '',
        blue VARCHAR(255) NOT NULL DEFAULT '',
        green VARCHAR(255) NOT NULL DEFAULT '',
        purple VARCHAR(255) NOT NULL DEFAULT ''
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS posts (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users (id) ON DELETE CASCADE,
        latitude DOUBLE PRECISION NOT NULL,
        longitude DOUBLE PRECISION NOT NULL,
        title VARCHAR(255) NOT NULL,
        color VARCHAR(16) NOT NULL
            CHECK (color IN ('RED', 'YELLOW', 'BLUE', 'GREEN', 'PURPLE')),
        address VARCHAR(255) NOT NULL,
        date DATE NOT NULL,
        description TEXT NOT NULL,
        score DOUBLE PRECISION NOT NULL
    );
    """,
    "CREATE INDEX IF NOT EXISTS posts_user_id_date_idx ON posts (user_id, date DESC);",
    """
    CREATE TABLE IF NOT EXISTS images (
        id SERIAL PRIMARY KEY,
        post_id INTEGER NOT NULL REFERENCES posts (id) ON DELETE CASCADE,
        uri TEXT NOT NULL
    );
    """,
    "CREATE INDEX IF NOT EXISTS images_post_id_idx ON images (post_id);",
    """
    CREATE TABLE IF NOT EXISTS favorites (
        id SERIAL PRIMARY KEY,
        post_id INTEGER NOT NULL REFERENCES posts (id) ON DELETE CASCADE,
        user_id INTEGER NOT NULL REFERENCES users (id) ON DELETE CASCADE,
        UNIQUE (post_id, user_id)
    );
    """,
]

TABLES = ["favorites", "images", "posts", "users"]


async def create_schema(db_name: str = "default"):
    """Create the tables if they do not exist yet"""
    pool = await DatabaseManager.get_pool(db_name)
    async with pool.acquire() as conn:
        for statement in SCHEMA_STATEMENTS:
            await conn.execute(statement)


async def truncate_all(db_name: str = "default"):
    pool = await DatabaseManager.get_pool(db_name)
    async with pool.acquire() as conn:
        await conn.execute(f"TRUNCATE TABLE {', '.join(TABLES)} RESTART IDENTITY CASCADE;")
