"""Pydantic schemas for the admin dashboard."""
from pydantic import BaseModel


class AdminStatsOut(BaseModel):
    user_count: int
    event_count: int
    open_event_count: int
    pending_request_count: int
