"""Request and response bodies for the auth API."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_WHATSAPP_RE = re.compile(r"^[+][0-9]{8,15}$")


def looks_like_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(alias="refreshToken", min_length=1)


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255)
    username: str = Field(min_length=1, max_length=255)
    whatsapp: str
    password: str = Field(min_length=8)
    password_confirmation: str
    role: Literal["user", "admin"] | None = None

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        if not looks_like_email(value):
            raise ValueError("must be a valid email address")
        return value.lower()

    @field_validator("whatsapp")
    @classmethod
    def _valid_whatsapp(cls, value: str) -> str:
        if not _WHATSAPP_RE.match(value):
            raise ValueError("must be + followed by 8 to 15 digits")
        return value

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.password != self.password_confirmation:
            raise ValueError("password confirmation does not match")
        return self


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    username: str
    email: str
    whatsapp: str | None = None
    role: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    user: UserOut
    message: str
