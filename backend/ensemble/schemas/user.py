"""Pydantic schemas for Users."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from ensemble.schemas.auth import PASSWORD_MIN_LENGTH
from ensemble.schemas.clothing import ClothingItemOut
from ensemble.schemas.role import RoleSummary


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    instrument: Optional[str] = None
    membership_number: Optional[str] = None
    role_ids: list[str] = []


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    password: Optional[str] = Field(default=None, min_length=PASSWORD_MIN_LENGTH)
    instrument: Optional[str] = None
    membership_number: Optional[str] = None
    image: Optional[str] = None
    role_ids: Optional[list[str]] = None


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: str  # legacy view computed from roles
    roles: list[RoleSummary] = []
    instrument: Optional[str] = None
    membership_number: Optional[str] = None
    image: Optional[str] = None
    must_change_password: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserDetailOut(UserOut):
    permissions: list[str] = []
    clothing_items: list[ClothingItemOut] = []


class UserSummary(BaseModel):
    id: str
    name: str
    email: str
    instrument: Optional[str] = None

    model_config = {"from_attributes": True}


class UserHistoryEntry(BaseModel):
    event_id: str
    title: str
    date: datetime
    location: Optional[str] = None
    status: str  # PRESENT, ABSENT or NO_RESPONSE


class UserHistoryStats(BaseModel):
    total_events: int
    present_count: int
    absent_count: int
    no_response_count: int
    participation_rate: int


class UserHistoryOut(BaseModel):
    user: UserSummary
    history: list[UserHistoryEntry]
    stats: UserHistoryStats
