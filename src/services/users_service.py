"""
Users service - validation and persistence gateway for user records
"""

import logging
import re
from typing import Any, Optional, Union

from fastapi import Request

from database.users_store import DuplicateUsernameError, UserStore
from models.enums import CreateChannel, ErrorType, Gender
from models.user import NewUser, UserChanges, UserCreateRequest, UserUpdateRequest
from services.base_service import ServiceResult

logger = logging.getLogger(__name__)

MIN_AGE = 1
MAX_AGE = 120
# Upper bound of a PostgreSQL SERIAL column
MAX_SERIAL_ID = 2_147_483_647

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_DIGITS_PATTERN = re.compile(r"[0-9]+")

USER_NOT_FOUND = "User not found"
USERNAME_TAKEN = "Username already exists"

_MISSING_FIELDS_MESSAGES = {
    CreateChannel.REQUEST_BODY: "All fields are required",
    CreateChannel.QUERY_STRING: "All fields are required in query parameters",
}

_CREATED_MESSAGES = {
    CreateChannel.REQUEST_BODY: "User created successfully",
    CreateChannel.QUERY_STRING: "User created successfully (INSECURE METHOD)",
}


def is_blank(value: Any) -> bool:
    """None, empty and whitespace-only strings count as missing"""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_integer(value: Any) -> Optional[int]:
    """Parse a JSON number or decimal string into an int, or None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    return None


def parse_user_id(user_id: Any) -> Optional[int]:
    """Ids are opaque at the HTTP boundary; only decimal integers can match a row"""
    if isinstance(user_id, str) and not _DIGITS_PATTERN.fullmatch(user_id.strip()):
        return None
    parsed = parse_integer(user_id)
    if parsed is None or not 0 < parsed <= MAX_SERIAL_ID:
        return None
    return parsed


def parse_gender(value: Any) -> Optional[Gender]:
    if not isinstance(value, str):
        return None
    try:
        return Gender(value.lower())
    except ValueError:
        return None


class UsersService:
    """Service for user record operations.

    Validation always completes before the store is touched. Store failures
    are logged with traceback and surfaced as a generic 500 outcome; nothing
    is retried.
    """

    def __init__(self, store: UserStore):
        self.store = store

    async def list_users(self) -> ServiceResult:
        try:
            users = await self.store.list_users()
        except Exception as e:
            logger.error(f"Error fetching users: {e}", exc_info=True)
            return ServiceResult.fail(ErrorType.INTERNAL_ERROR, "Failed to retrieve users")

        return ServiceResult.ok(users, "Users retrieved successfully")

    async def get_user(self, user_id: Any) -> ServiceResult:
        parsed_id = parse_user_id(user_id)
        if parsed_id is None:
            return ServiceResult.fail(ErrorType.NOT_FOUND, USER_NOT_FOUND)

        try:
            user = await self.store.get_user(parsed_id)
        except Exception as e:
            logger.error(f"Error fetching user {parsed_id}: {e}", exc_info=True)
            return ServiceResult.fail(ErrorType.INTERNAL_ERROR, "Failed to retrieve user")

        if user is None:
            return ServiceResult.fail(ErrorType.NOT_FOUND, USER_NOT_FOUND)
        return ServiceResult.ok(user, "User retrieved successfully")

    def validate_new_user(
        self,
        request: UserCreateRequest,
        channel: CreateChannel = CreateChannel.REQUEST_BODY
    ) -> Union[NewUser, ServiceResult]:
        """
        Validate a creation request

        Checks run in order and the first failure wins: presence of all four
        fields, age range, then gender.

        Returns:
            NewUser on success, otherwise a failed ServiceResult
        """
        fields = (request.username, request.password, request.age, request.gender)
        if any(is_blank(value) for value in fields):
            return ServiceResult.fail(ErrorType.VALIDATION_ERROR, _MISSING_FIELDS_MESSAGES[channel])

        age = parse_integer(request.age)
        if age is None or not MIN_AGE <= age <= MAX_AGE:
            return ServiceResult.fail(
                ErrorType.VALIDATION_ERROR, f"Age must be between {MIN_AGE} and {MAX_AGE}"
            )

        gender = parse_gender(request.gender)
        if gender is None:
            return ServiceResult.fail(
                ErrorType.VALIDATION_ERROR, "Gender must be male, female, or other"
            )

        return NewUser(
            username=str(request.username),
            password=str(request.password),
            age=age,
            gender=gender,
        )

    async def create_user(
        self,
        request: UserCreateRequest,
        channel: CreateChannel = CreateChannel.REQUEST_BODY
    ) -> ServiceResult:
        """
        Create a new user

        Args:
            request: Raw creation fields as extracted by the HTTP layer
            channel: Which entry point the request arrived through; selects
                the message wording only

        Returns:
            ServiceResult with the created user (status 201)
        """
        validated = self.validate_new_user(request, channel)
        if isinstance(validated, ServiceResult):
            return validated

        try:
            user = await self.store.insert_user(validated)
        except DuplicateUsernameError:
            return ServiceResult.fail(ErrorType.CONFLICT, USERNAME_TAKEN)
        except Exception as e:
            logger.error(f"Error creating user: {e}", exc_info=True)
            return ServiceResult.fail(ErrorType.INTERNAL_ERROR, "Failed to create user")

        logger.info(f"Created user {user['id']} via {channel.value}")
        return ServiceResult.ok(user, _CREATED_MESSAGES[channel], status_code=201)

    async def update_user(self, user_id: Any, request: UserUpdateRequest) -> ServiceResult:
        """
        Update username, age and gender of an existing user

        Only presence is checked here; age range and gender values are not
        re-validated on update. The password is never touched.
        """
        if any(is_blank(value) for value in (request.username, request.age, request.gender)):
            return ServiceResult.fail(
                ErrorType.VALIDATION_ERROR, "Username, age, and gender are required"
            )

        age = parse_integer(request.age)
        if age is None:
            return ServiceResult.fail(ErrorType.VALIDATION_ERROR, "Age must be a whole number")

        parsed_id = parse_user_id(user_id)
        if parsed_id is None:
            return ServiceResult.fail(ErrorType.NOT_FOUND, USER_NOT_FOUND)

        changes = UserChanges(
            username=str(request.username),
            age=age,
            gender=str(request.gender).lower(),
        )

        try:
            user = await self.store.update_user(parsed_id, changes)
        except DuplicateUsernameError:
            return ServiceResult.fail(ErrorType.CONFLICT, USERNAME_TAKEN)
        except Exception as e:
            logger.error(f"Error updating user {parsed_id}: {e}", exc_info=True)
            return ServiceResult.fail(ErrorType.INTERNAL_ERROR, "Failed to update user")

        if user is None:
            return ServiceResult.fail(ErrorType.NOT_FOUND, USER_NOT_FOUND)

        logger.info(f"Updated user {parsed_id}")
        return ServiceResult.ok(user, "User updated successfully")

    async def delete_user(self, user_id: Any) -> ServiceResult:
        parsed_id = parse_user_id(user_id)
        if parsed_id is None:
            return ServiceResult.fail(ErrorType.NOT_FOUND, USER_NOT_FOUND)

        try:
            user = await self.store.delete_user(parsed_id)
        except Exception as e:
            logger.error(f"Error deleting user {parsed_id}: {e}", exc_info=True)
            return ServiceResult.fail(ErrorType.INTERNAL_ERROR, "Failed to delete user")

        if user is None:
            return ServiceResult.fail(ErrorType.NOT_FOUND, USER_NOT_FOUND)

        logger.info(f"Deleted user {parsed_id}")
        return ServiceResult.ok(user, "User deleted successfully")


def get_users_service(request: Request) -> UsersService:
    """Get the users service owned by the running application"""
    return request.app.state.users_service
