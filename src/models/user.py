"""
User-related models
"""

from dataclasses import dataclass
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field

from models.enums import Gender

# Wire-level request models. Fields are deliberately loose so the service
# layer can report missing or malformed values with its own messages.

class UserCreateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: Optional[Any] = Field(None, description="Unique login name")
    password: Optional[Any] = Field(None, description="Stored verbatim")
    age: Optional[Any] = Field(None, description="Whole number between 1 and 120")
    gender: Optional[Any] = Field(None, description="male, female or other (case-insensitive)")

class UserUpdateRequest(BaseModel):
    """Update payload. A password in the body is ignored."""
    model_config = ConfigDict(extra="ignore")

    username: Optional[Any] = None
    age: Optional[Any] = None
    gender: Optional[Any] = None


# Validated values handed to the store

@dataclass(frozen=True)
class NewUser:
    username: str
    password: str
    age: int
    gender: Gender

@dataclass(frozen=True)
class UserChanges:
    username: str
    age: int
    gender: str
