from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _check_quarter_hour(value: time) -> time:
    if value.minute % 15 != 0 or value.second != 0 or value.microsecond != 0:
        raise ValueError("appointment_time must be in 15-minute increments")
    return value


class ReservationCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=32)
    appointment_date: date
    appointment_time: time
    total_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    deposit_paid: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    is_paid: bool = False
    deposit_paid_status: bool = False
    rest_paid_status: bool = False
    design_images: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    artist_id: Optional[int] = None

    @field_validator("appointment_time")
    @classmethod
    def check_quarter_hour(cls, value: time) -> time:
        return _check_quarter_hour(value)


class ReservationUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, min_length=1, max_length=32)
    appointment_date: Optional[date] = None
    appointment_time: Optional[time] = None
    total_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    deposit_paid: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    is_paid: Optional[bool] = None
    deposit_paid_status: Optional[bool] = None
    rest_paid_status: Optional[bool] = None
    design_images: Optional[list[str]] = None
    notes: Optional[str] = None
    artist_id: Optional[int] = None

    @field_validator(
        "first_name",
        "last_name",
        "phone",
        "appointment_date",
        "appointment_time",
        "total_price",
        "deposit_paid",
        "is_paid",
        "deposit_paid_status",
        "rest_paid_status",
        "design_images",
        mode="before",
    )
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("appointment_time")
    @classmethod
    def check_quarter_hour(cls, value: Optional[time]) -> Optional[time]:
        if value is None:
            return value
        return _check_quarter_hour(value)


class ReservationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reservation_number: int
    first_name: str
    last_name: str
    phone: str
    appointment_date: date
    appointment_time: time
    total_price: Decimal
    deposit_paid: Decimal
    remaining_amount: Decimal
    is_paid: bool
    deposit_paid_status: bool
    rest_paid_status: bool
    design_images: list[str]
    notes: Optional[str]
    artist_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    @property
    def fully_paid(self) -> bool:
        return self.deposit_paid_status and self.rest_paid_status

    @property
    def payment_label(self) -> str:
        if self.fully_paid:
            return "Fully Paid"
        if self.deposit_paid_status:
            return "Deposit Paid"
        return "Pending"
