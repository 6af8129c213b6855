"""
pytest configuration and fixtures for the user records suite
"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from faker import Faker
from fastapi.testclient import TestClient

from app import app
from database.users_store import DuplicateUsernameError
from models.user import NewUser, UserChanges
from services.users_service import UsersService, get_users_service
from utils.helpers import format_timestamp


class InMemoryUserStore:
    """Stand-in for UserStore that keeps rows in a dict and enforces unique usernames"""

    def __init__(self):
        self.rows: Dict[int, Dict[str, Any]] = {}
        self.next_id = 1
        self.calls = 0
        self.error: Optional[Exception] = None
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return format_timestamp(self._clock)

    def _enter(self):
        self.calls += 1
        if self.error:
            raise self.error

    def _username_taken(self, username: str, exclude_id: Optional[int] = None) -> bool:
        return any(
            row["username"] == username and row_id != exclude_id
            for row_id, row in self.rows.items()
        )

    @staticmethod
    def _public(row: Dict[str, Any]) -> Dict[str, Any]:
        return {key: row[key] for key in ("id", "username", "age", "gender", "created_at")}

    async def list_users(self) -> List[Dict[str, Any]]:
        self._enter()
        rows = sorted(self.rows.values(), key=lambda row: row["created_at"], reverse=True)
        return [self._public(row) for row in rows]

    async def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        self._enter()
        row = self.rows.get(user_id)
        return self._public(row) if row else None

    async def insert_user(self, user: NewUser) -> Dict[str, Any]:
        self._enter()
        if self._username_taken(user.username):
            raise DuplicateUsernameError(user.username)
        row = {
            "id": self.next_id,
            "username": user.username,
            "password": user.password,
            "age": user.age,
            "gender": user.gender.value,
            "created_at": self._tick(),
            "updated_at": None,
        }
        self.rows[row["id"]] = row
        self.next_id += 1
        return self._public(row)

    async def update_user(self, user_id: int, changes: UserChanges) -> Optional[Dict[str, Any]]:
        self._enter()
        row = self.rows.get(user_id)
        if row is None:
            return None
        if self._username_taken(changes.username, exclude_id=user_id):
            raise DuplicateUsernameError(changes.username)
        row.update(
            username=changes.username,
            age=changes.age,
            gender=changes.gender,
            updated_at=self._tick(),
        )
        return {key: row[key] for key in ("id", "username", "age", "gender", "updated_at")}

    async def delete_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        self._enter()
        row = self.rows.pop(user_id, None)
        return {"id": row["id"], "username": row["username"]} if row else None


class UserDataFactory:
    """Generates valid creation payloads"""

    def __init__(self):
        self.fake = Faker()

    def generate_user(self, **overrides) -> Dict[str, Any]:
        data = {
            "username": f"test_{self.fake.unique.user_name()}",
            "password": self.fake.password(length=12),
            "age": self.fake.random_int(min=1, max=120),
            "gender": self.fake.random_element(["male", "female", "other", "Male", "FEMALE"]),
        }
        data.update(overrides)
        return data


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def service(store) -> UsersService:
    return UsersService(store)


@pytest.fixture
def data_factory() -> UserDataFactory:
    return UserDataFactory()


@pytest.fixture
def client(service):
    """HTTP client against the real app with the in-memory service injected"""
    app.dependency_overrides[get_users_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
