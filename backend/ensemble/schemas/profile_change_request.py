"""Pydantic schemas for ProfileChangeRequests."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from ensemble.models.profile_change_request import RequestStatus


class ProfileChangeRequestCreate(BaseModel):
    new_name: Optional[str] = None
    new_email: Optional[str] = None
    new_instrument: Optional[str] = None
    new_image: Optional[str] = None


class RequesterOut(BaseModel):
    name: str
    email: str
    instrument: Optional[str] = None
    membership_number: Optional[str] = None

    model_config = {"from_attributes": True}


class ProfileChangeRequestOut(BaseModel):
    id: str
    user_id: str
    new_name: Optional[str] = None
    new_email: Optional[str] = None
    new_instrument: Optional[str] = None
    new_image: Optional[str] = None
    status: RequestStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    user: Optional[RequesterOut] = None

    model_config = {"from_attributes": True}
