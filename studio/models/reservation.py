from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional

from sqlalchemy import JSON, Boolean, Date, Integer, Numeric, String, Text, Time, false
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Reservation(TimestampMixin, Base):
    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    reservation_number: Mapped[int] = mapped_column(Integer, unique=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    phone: Mapped[str] = mapped_column(String(32))
    appointment_date: Mapped[date] = mapped_column(Date, index=True)
    appointment_time: Mapped[time] = mapped_column(Time)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    deposit_paid: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())
    deposit_paid_status: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())
    rest_paid_status: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())
    design_images: Mapped[list[str]] = mapped_column(JSON, default=list)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Weak reference: staff rows can be deleted while reservations still point at them.
    artist_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    @property
    def remaining_amount(self) -> Decimal:
        return Decimal(self.total_price or 0) - Decimal(self.deposit_paid or 0)


class ReservationCounter(Base):
    """High-water mark of issued reservation numbers."""

    __tablename__ = "reservation_counters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    last_number: Mapped[int] = mapped_column(Integer)
