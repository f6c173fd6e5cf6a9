from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

from .reservation import ReservationRead


class EconomicsSummary(BaseModel):
    period: Literal["today", "week", "month", "custom"]
    start: date
    end: date
    total_revenue: Decimal
    total_deposits: Decimal
    actual_deposits_collected: Decimal
    total_paid: Decimal
    pending_revenue: Decimal
    total_reservations: int
    deposits_paid_count: int
    rest_paid_count: int
    fully_paid_count: int
    pending_reservations: int
    average_ticket: Decimal


class ReservationActivity(BaseModel):
    period: Literal["today", "yesterday", "week", "month"]
    total_reservations: int
    total_revenue: Decimal
    total_deposits: Decimal
    average_ticket: Decimal
    fully_paid_count: int
    pending_count: int
    items: list[ReservationRead]
