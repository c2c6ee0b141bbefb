"""Pydantic schemas for login, session claims and password changes."""
from typing import Optional
from pydantic import BaseModel, Field

PASSWORD_MIN_LENGTH = 6


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SessionOut(BaseModel):
    id: str
    email: str
    name: str
    role: str
    roles: list[str]
    permissions: list[str]
    must_change_password: bool


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: SessionOut


class PasswordChange(BaseModel):
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
