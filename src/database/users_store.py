"""
SQL access for the users table
"""

import asyncpg
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from database.connection import Database
from models.user import NewUser, UserChanges
from utils.helpers import format_timestamp

logger = logging.getLogger(__name__)

PUBLIC_COLUMNS = "id, username, age, gender, created_at"


class DuplicateUsernameError(Exception):
    """Raised when the unique index on users.username rejects a write"""


def _row_to_dict(row) -> Dict[str, Any]:
    data = dict(row)
    # Convert datetime objects to the envelope timestamp format
    for key, value in data.items():
        if isinstance(value, datetime):
            data[key] = format_timestamp(value)
    return data


class UserStore:
    """PostgreSQL-backed persistence for user records.

    Every query projects away the password column. Passwords are written
    verbatim by insert_user and never read back.
    """

    def __init__(self, database: Database):
        self.database = database

    async def list_users(self) -> List[Dict[str, Any]]:
        query = f"SELECT {PUBLIC_COLUMNS} FROM users ORDER BY created_at DESC"
        logger.info(f"Executing READ query: {query}")

        async with self.database.acquire() as conn:
            rows = await conn.fetch(query)
        return [_row_to_dict(row) for row in rows]

    async def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        query = f"SELECT {PUBLIC_COLUMNS} FROM users WHERE id = $1"
        logger.info(f"Executing READ query: {query}")

        async with self.database.acquire() as conn:
            row = await conn.fetchrow(query, user_id)
        return _row_to_dict(row) if row else None

    async def insert_user(self, user: NewUser) -> Dict[str, Any]:
        query = f"""
            INSERT INTO users (username, password, age, gender)
            VALUES ($1, $2, $3, $4)
            RETURNING {PUBLIC_COLUMNS}
        """
        logger.info(f"Executing INSERT for username: {user.username}")

        async with self.database.acquire() as conn:
            try:
                row = await conn.fetchrow(
                    query, user.username, user.password, user.age, user.gender.value
                )
            except asyncpg.UniqueViolationError as e:
                logger.warning("Unique constraint violation on users.username")
                raise DuplicateUsernameError(user.username) from e

        if not row:
            raise RuntimeError("Insert operation failed - no data returned")
        return _row_to_dict(row)

    async def update_user(self, user_id: int, changes: UserChanges) -> Optional[Dict[str, Any]]:
        query = """
            UPDATE users
            SET username = $1, age = $2, gender = $3, updated_at = CURRENT_TIMESTAMP
            WHERE id = $4
            RETURNING id, username, age, gender, updated_at
        """
        logger.info(f"Executing UPDATE for user {user_id}")

        async with self.database.acquire() as conn:
            try:
                row = await conn.fetchrow(
                    query, changes.username, changes.age, changes.gender, user_id
                )
            except asyncpg.UniqueViolationError as e:
                logger.warning("Unique constraint violation on users.username")
                raise DuplicateUsernameError(changes.username) from e

        return _row_to_dict(row) if row else None

    async def delete_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        query = "DELETE FROM users WHERE id = $1 RETURNING id, username"
        logger.info(f"Executing DELETE: {query}")
        logger.info(f"Parameters: [{user_id}]")

        async with self.database.acquire() as conn:
            row = await conn.fetchrow(query, user_id)
        return _row_to_dict(row) if row else None
