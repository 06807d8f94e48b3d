from __future__ import annotations

import re
from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.common import CamelModel

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"


def _normalize_email(value: str) -> str:
    value = value.lower().strip()
    if not re.match(EMAIL_PATTERN, value):
        raise ValueError("Please provide a valid email")
    if len(value) > 255:
        raise ValueError("Email must be less than 255 characters")
    return value


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: str
    password: str = Field(min_length=6, max_length=200)

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value.strip()

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return _normalize_email(value)


class LoginRequest(CamelModel):
    email: str
    password: str = Field(min_length=1, max_length=200)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return _normalize_email(value)


class UserOut(CamelModel):
    id: str
    name: str
    email: str
    created_at: datetime


class AuthPayload(CamelModel):
    token: str
    user: UserOut
