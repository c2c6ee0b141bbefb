"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from ensemble.schemas.attendance import (
    AttendanceHistoryWithUserOut,
    AttendanceWithUserOut,
    AttendeeRef,
)


def _single_line(value: Optional[str]) -> Optional[str]:
    """Titles end up in email subjects, which cannot carry line breaks."""
    if value is not None and ("\n" in value or "\r" in value):
        raise ValueError("title must be a single line")
    return value


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    date: datetime
    location: Optional[str] = None
    description: Optional[str] = None
    is_closed: bool = False

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _to_utc(value)

    @field_validator("title")
    @classmethod
    def reject_line_breaks(cls, value: Optional[str]) -> Optional[str]:
        return _single_line(value)


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date: Optional[datetime] = None
    location: Optional[str] = None
    description: Optional[str] = None
    is_closed: Optional[bool] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _to_utc(value)

    @field_validator("title")
    @classmethod
    def reject_line_breaks(cls, value: Optional[str]) -> Optional[str]:
        return _single_line(value)


class EventOut(BaseModel):
    id: str
    title: str
    date: datetime
    location: Optional[str] = None
    description: Optional[str] = None
    is_closed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EventWithStatusOut(EventOut):
    user_status: Optional[str] = None  # caller's PRESENT/ABSENT, None if no response


class EventDetailOut(BaseModel):
    event: EventOut
    attendances: list[AttendanceWithUserOut] = []
    history: list[AttendanceHistoryWithUserOut] = []
    no_response_users: list[AttendeeRef] = []
    present_count: int
    absent_count: int
    no_response_count: int
    total_users: int
