"""Pydantic schemas for Roles."""
from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field

from ensemble.services.permissions import Permission


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    permissions: list[Permission] = []


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    permissions: Optional[list[Permission]] = None


class RoleOut(BaseModel):
    id: str
    name: str
    # Stored as JSON text on the model; read back through Role.permission_list
    permissions: list[str] = Field(validation_alias=AliasChoices("permission_list", "permissions"))
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RoleSummary(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}
