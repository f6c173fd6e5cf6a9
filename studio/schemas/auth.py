from datetime import datetime

from pydantic import BaseModel, Field

from studio.models.enums import StaffRole


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)


class SessionRead(BaseModel):
    id: int
    username: str
    name: str
    role: StaffRole
    permissions: list[str]
    expires_at: datetime


class LoginResponse(BaseModel):
    staff: SessionRead
    access_token: str
    token_type: str = "bearer"


class ActivityResponse(BaseModel):
    expires_at: datetime
