"""Pydantic schemas for user registration and login."""

from datetime import datetime

from pydantic import EmailStr, Field

from cinebook.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=2)
    phone: str | None = Field(None, pattern=r"^[0-9]{10,15}$")


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class UserProfile(CamelModel):
    id: int
    email: str
    name: str
    phone: str | None = None
    created_at: datetime | None = None


class AuthData(CamelModel):
    user: UserProfile
    token: str


class ProfileData(CamelModel):
    user: UserProfile
