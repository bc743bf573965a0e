import logging
import os

import asyncpg
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from mapjournal.db_context import DatabaseManager

logger = logging.getLogger(__name__)

ENV_PREFIX = "MAPJOURNAL_DB_"


class DatabaseConfig(BaseModel):
    """Connection settings for one PostgreSQL pool"""

    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    user: str = "postgres"
    password: str = "postgres"
    min_size: int = Field(default=1, ge=0)
    max_size: int = Field(default=10, ge=1)
    db_schema: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv_path: str | os.PathLike | None = None) -> "DatabaseConfig":
        """Read MAPJOURNAL_DB_* variables, loading a .env file first if present"""
        load_dotenv(dotenv_path)
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        return cls(**values)

    @property
    def dsn(self) -> str:
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level.upper())


async def init_pool(config: DatabaseConfig, name: str = "default") -> asyncpg.Pool:
    """Create an asyncpg pool and register it with DatabaseManager under name"""
    pool = await asyncpg.create_pool(
        config.dsn, min_size=config.min_size, max_size=config.max_size
    )
    await DatabaseManager.add_pool(name, pool)
    logger.info(
        "Connected pool '%s' to %s:%s/%s", name, config.host, config.port, config.database
    )
    return pool


async def close_pool(name: str = "default"):
    pool = DatabaseManager.remove_pool(name)
    if pool is not None:
        await pool.close()
        logger.info("Closed pool '%s'", name)
