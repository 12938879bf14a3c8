from datetime import datetime
import re
from typing import Any
from pydantic import BaseModel, field_validator


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class User(BaseModel):
    id: str
    email: str
    password_hash: str
    created_at: datetime


class Credentials(BaseModel):
    email: str
    password: str

    @field_validator("email", mode="before")
    def normalize_email(cls, value: Any):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("email")
    def validate_email(cls, value: str):
        if not EMAIL_PATTERN.match(value):
            raise ValueError("'email' must be a valid email address")
        return value

    @field_validator("password")
    def validate_password(cls, value: str):
        if not value:
            raise ValueError("'password' must not be empty")
        return value


class AuthToken(BaseModel):
    token: str
