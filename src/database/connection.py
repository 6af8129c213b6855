"""
Database connection and pool management
"""

import asyncio
import asyncpg
import logging
from typing import Optional

from config.settings import (
    DB_HOST,
    DB_PORT,
    DB_USER,
    DB_PASSWORD,
    DB_NAME,
    DB_POOL_MIN_SIZE,
    DB_POOL_MAX_SIZE,
    DB_COMMAND_TIMEOUT,
)

logger = logging.getLogger(__name__)

USERS_TABLE_DDL = """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        username VARCHAR(255) UNIQUE NOT NULL,
        password VARCHAR(255) NOT NULL,
        age INTEGER NOT NULL,
        gender VARCHAR(10) NOT NULL,
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ
    )
"""


class Database:
    """Owns the asyncpg pool for the lifetime of the application"""

    def __init__(
        self,
        host: str = DB_HOST,
        port: int = DB_PORT,
        user: str = DB_USER,
        password: str = DB_PASSWORD,
        database: str = DB_NAME,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self._pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Create the pool, verify connectivity and bootstrap the schema.

        A failed connectivity check is logged but not raised so the HTTP
        server still starts; requests fail individually until PostgreSQL
        becomes reachable.
        """
        self._pool = await asyncpg.create_pool(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            database=self.database,
            min_size=DB_POOL_MIN_SIZE,
            max_size=DB_POOL_MAX_SIZE,
            command_timeout=DB_COMMAND_TIMEOUT,
        )

        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
                await conn.execute(USERS_TABLE_DDL)
            logger.info("Connected to PostgreSQL database")
        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error(f"Error connecting to PostgreSQL: {e}")

    async def close(self):
        """Close database connection pool"""
        if self._pool:
            await self._pool.close()
            self._pool = None
        logger.info("Database connections closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool not initialized")
        return self._pool

    def acquire(self):
        """Acquire a connection from the pool (async context manager)"""
        return self.pool.acquire()
