"""
Pydantic schemas for requests and responses of the task manager API.

Outward JSON uses camelCase keys (``ownerId``, ``accessToken``); Python
attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from database.models import TaskPriority, TaskStatus

_http_url = TypeAdapter(AnyHttpUrl)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _check_avatar(value: Optional[str], allow_blank: bool) -> Optional[str]:
    if value is None or (allow_blank and value == ""):
        return value
    try:
        _http_url.validate_python(value)
    except PydanticValidationError:
        raise ValueError("avatar must be a valid http(s) URL")
    return value


def _check_length(value: Optional[str], lo: int, hi: int, name: str) -> Optional[str]:
    """``""`` passes through (it clears the field), anything else must fit."""
    if value is None or value == "":
        return value
    if not lo <= len(value) <= hi:
        raise ValueError(f"{name} must be {lo}-{hi} characters")
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Auth
# ═══════════════════════════════════════════════════════════════════════════════


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=2, max_length=30, pattern=r"^[A-Za-z0-9_]+$")
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    about: Optional[str] = Field(None, min_length=2, max_length=200)
    avatar: Optional[str] = None

    @field_validator("avatar")
    @classmethod
    def avatar_is_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_avatar(value, allow_blank=False)


class SigninRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class AccessToken(_CamelModel):
    access_token: str


# ═══════════════════════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════════════════════


class UserOut(_CamelModel):
    """Outward user representation; the password hash is never part of it."""

    id: int
    username: str
    email: str
    about: Optional[str] = None
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UpdateUserRequest(BaseModel):
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    about: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("about")
    @classmethod
    def about_length(cls, value: Optional[str]) -> Optional[str]:
        return _check_length(value, 2, 200, "about")

    @field_validator("avatar")
    @classmethod
    def avatar_is_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_avatar(value, allow_blank=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Tasks
# ═══════════════════════════════════════════════════════════════════════════════


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=250)
    description: Optional[str] = Field(None, min_length=1, max_length=1024)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None


class UpdateTaskRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=250)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("title may not be null")
        return value

    @field_validator("description")
    @classmethod
    def description_length(cls, value: Optional[str]) -> Optional[str]:
        return _check_length(value, 1, 1024, "description")


class TaskOut(_CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
