from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from studio.models.enums import StaffRole


class StaffCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
    role: StaffRole = StaffRole.STAFF


class StaffUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    username: Optional[str] = Field(default=None, min_length=1, max_length=64)
    password: Optional[str] = Field(default=None, min_length=1)
    role: Optional[StaffRole] = None

    @model_validator(mode="before")
    @classmethod
    def check_at_least_one(cls, values):
        data = values or {}
        if not any(data.get(field) is not None for field in ("name", "username", "password", "role")):
            raise ValueError("At least one field must be provided for update")
        return values


class StaffRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    username: str
    role: StaffRole
    permissions: list[str]
    created_at: datetime
    updated_at: datetime
