"""
UserStore SQL layer against a fake asyncpg connection
"""

import asyncpg
import pytest
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from database.connection import Database
from database.users_store import DuplicateUsernameError, UserStore
from models.enums import Gender
from models.user import NewUser, UserChanges
from models.user import UserCreateRequest
from services.users_service import UsersService

CREATED_AT = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


class FakeConnection:
    """Records queries and returns canned rows"""

    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.queries = []

    async def fetch(self, query, *args):
        self.queries.append((query, args))
        return self.rows

    async def fetchrow(self, query, *args):
        self.queries.append((query, args))
        if self.error:
            raise self.error
        return self.rows[0] if self.rows else None


class FakeDatabase:

    def __init__(self, conn: FakeConnection):
        self.conn = conn

    @asynccontextmanager
    async def acquire(self):
        yield self.conn


def make_store(rows=None, error=None):
    conn = FakeConnection(rows=rows, error=error)
    return UserStore(FakeDatabase(conn)), conn


class TestUserStore:

    @pytest.mark.asyncio
    async def test_list_users_orders_newest_first_and_serializes_timestamps(self):
        row = {"id": 1, "username": "alice", "age": 30, "gender": "female", "created_at": CREATED_AT}
        store, conn = make_store(rows=[row])

        users = await store.list_users()

        query, args = conn.queries[0]
        assert "ORDER BY created_at DESC" in query
        assert "password" not in query
        assert args == ()
        assert users == [{**row, "created_at": "2024-05-01T12:30:00.000Z"}]

    @pytest.mark.asyncio
    async def test_get_user_binds_id_and_handles_missing_row(self):
        store, conn = make_store()

        assert await store.get_user(7) is None
        assert conn.queries[0][1] == (7,)

    @pytest.mark.asyncio
    async def test_insert_user_writes_lowercase_gender_and_returns_public_fields(self):
        row = {"id": 3, "username": "alice", "age": 30, "gender": "female", "created_at": CREATED_AT}
        store, conn = make_store(rows=[row])

        user = await store.insert_user(
            NewUser(username="alice", password="p1", age=30, gender=Gender.FEMALE)
        )

        query, args = conn.queries[0]
        assert query.strip().startswith("INSERT INTO users")
        assert "RETURNING id, username, age, gender, created_at" in query
        assert args == ("alice", "p1", 30, "female")
        assert user["created_at"] == "2024-05-01T12:30:00.000Z"

    @pytest.mark.asyncio
    async def test_insert_unique_violation_becomes_duplicate_username(self):
        store, _ = make_store(error=asyncpg.UniqueViolationError("duplicate key value"))

        with pytest.raises(DuplicateUsernameError):
            await store.insert_user(NewUser(username="alice", password="p1", age=30, gender=Gender.MALE))

    @pytest.mark.asyncio
    async def test_update_user_sets_updated_at_and_never_touches_password(self):
        row = {"id": 3, "username": "bob", "age": 31, "gender": "male", "updated_at": CREATED_AT}
        store, conn = make_store(rows=[row])

        user = await store.update_user(3, UserChanges(username="bob", age=31, gender="male"))

        query, args = conn.queries[0]
        assert "updated_at = CURRENT_TIMESTAMP" in query
        assert "password" not in query
        assert args == ("bob", 31, "male", 3)
        assert user["updated_at"] == "2024-05-01T12:30:00.000Z"

    @pytest.mark.asyncio
    async def test_update_unique_violation_becomes_duplicate_username(self):
        store, _ = make_store(error=asyncpg.UniqueViolationError("duplicate key value"))

        with pytest.raises(DuplicateUsernameError):
            await store.update_user(3, UserChanges(username="alice", age=31, gender="male"))

    @pytest.mark.asyncio
    async def test_delete_user_returns_id_and_username(self):
        store, conn = make_store(rows=[{"id": 3, "username": "bob"}])

        assert await store.delete_user(3) == {"id": 3, "username": "bob"}
        assert "RETURNING id, username" in conn.queries[0][0]

    @pytest.mark.asyncio
    async def test_other_database_errors_propagate(self):
        store, _ = make_store(error=asyncpg.PostgresError("disk full"))

        with pytest.raises(asyncpg.PostgresError):
            await store.insert_user(NewUser(username="a", password="b", age=1, gender=Gender.OTHER))


class TestDatabase:

    def test_pool_requires_connect(self):
        database = Database()

        with pytest.raises(RuntimeError, match="Database pool not initialized"):
            database.acquire()

    @pytest.mark.asyncio
    async def test_close_without_connect_is_safe(self):
        await Database().close()

    @pytest.mark.asyncio
    async def test_service_over_unconnected_database_returns_internal_error(self):
        service = UsersService(UserStore(Database()))

        listed = await service.list_users()
        created = await service.create_user(
            UserCreateRequest(username="alice", password="p1", age=30, gender="female")
        )

        assert (listed.status_code, listed.message) == (500, "Failed to retrieve users")
        assert (created.status_code, created.message) == (500, "Failed to create user")
