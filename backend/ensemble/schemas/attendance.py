"""Pydantic schemas for attendance submissions and the attendance log."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from ensemble.models.attendance import AttendanceStatus


class AttendanceSubmit(BaseModel):
    event_id: str
    status: AttendanceStatus


class AttendanceOut(BaseModel):
    id: str
    user_id: str
    event_id: str
    status: AttendanceStatus
    updated_at: datetime

    model_config = {"from_attributes": True}


class AttendanceHistoryOut(BaseModel):
    id: str
    user_id: str
    event_id: str
    status: AttendanceStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class AttendeeRef(BaseModel):
    id: str
    name: str
    email: str
    instrument: Optional[str] = None

    model_config = {"from_attributes": True}


class EventRef(BaseModel):
    id: str
    title: str
    date: datetime

    model_config = {"from_attributes": True}


class AttendanceWithUserOut(AttendanceOut):
    user: AttendeeRef


class AttendanceHistoryWithUserOut(AttendanceHistoryOut):
    user: AttendeeRef


class AdminAttendanceOut(AttendanceOut):
    user: AttendeeRef
    event: EventRef
