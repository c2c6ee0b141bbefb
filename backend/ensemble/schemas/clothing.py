"""Pydantic schemas for ClothingItems."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ClothingItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    image: str = Field(min_length=1)


class ClothingItemOut(BaseModel):
    id: str
    user_id: str
    name: str
    image: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
