from __future__ import annotations

import csv
import io
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from studio.schemas import EconomicsSummary, ReservationActivity, ReservationRead

from . import exceptions
from .reservation_service import ReservationService
from .staff_service import StaffService
from .telegram.messages import NOT_ASSIGNED

ZERO = Decimal("0")
EXPORT_HEADER = ["Date", "Client", "Phone", "Artist", "Total Price", "Deposit", "Status"]


def _sum(values) -> Decimal:
    return sum((Decimal(value) for value in values), ZERO)


def _average(total: Decimal, count: int) -> Decimal:
    if not count:
        return ZERO
    return (total / count).quantize(Decimal("0.01"))


def economics_range(period: str, today: date, start: Optional[date] = None, end: Optional[date] = None) -> tuple[date, date]:
    """Appointment-date window for the economics view. Weeks start on Sunday."""

    if period == "today":
        return today, today
    if period == "week":
        return today - timedelta(days=(today.weekday() + 1) % 7), today
    if period == "month":
        return today.replace(day=1), today
    if period == "custom":
        if start is None or end is None:
            raise exceptions.ServiceError("Custom period requires start and end dates")
        return start, end
    raise exceptions.ServiceError(f"Unknown period: {period}")


def activity_range(period: str, now: datetime) -> tuple[datetime, datetime]:
    """Creation-time window for the reservation activity view."""

    start_of_today = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    end_of_today = start_of_today + timedelta(days=1)
    if period == "today":
        return start_of_today, end_of_today
    if period == "yesterday":
        return start_of_today - timedelta(days=1), start_of_today
    if period == "week":
        return start_of_today - timedelta(days=7), end_of_today
    if period == "month":
        return start_of_today - timedelta(days=30), end_of_today
    raise exceptions.ServiceError(f"Unknown period: {period}")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AnalyticsService:
    def __init__(self, db: Session):
        self.db = db
        self.reservations = ReservationService(db)

    def economics_reservations(self, start: date, end: date) -> list[ReservationRead]:
        return self.reservations.list_reservations(date_from=start, date_to=end)

    def economics(
        self,
        *,
        period: str = "today",
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> EconomicsSummary:
        today = today or datetime.now(tz=timezone.utc).date()
        range_start, range_end = economics_range(period, today, start, end)
        items = self.economics_reservations(range_start, range_end)

        fully_paid = [item for item in items if item.fully_paid]
        total_revenue = _sum(item.total_price for item in items)
        return EconomicsSummary(
            period=period,
            start=range_start,
            end=range_end,
            total_revenue=total_revenue,
            total_deposits=_sum(item.deposit_paid for item in items),
            actual_deposits_collected=_sum(item.deposit_paid for item in items if item.deposit_paid_status),
            total_paid=_sum(item.total_price for item in fully_paid),
            pending_revenue=_sum(item.remaining_amount for item in items if not item.rest_paid_status),
            total_reservations=len(items),
            deposits_paid_count=sum(1 for item in items if item.deposit_paid_status),
            rest_paid_count=sum(1 for item in items if item.rest_paid_status),
            fully_paid_count=len(fully_paid),
            pending_reservations=len(items) - len(fully_paid),
            average_ticket=_average(total_revenue, len(items)),
        )

    def export_economics_csv(self, start: date, end: date) -> str:
        artist_names = StaffService(self.db).artist_names()
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(EXPORT_HEADER)
        for item in self.economics_reservations(start, end):
            writer.writerow(
                [
                    item.appointment_date.isoformat(),
                    f"{item.first_name} {item.last_name}",
                    item.phone,
                    artist_names.get(item.artist_id, NOT_ASSIGNED) if item.artist_id else NOT_ASSIGNED,
                    f"{item.total_price:.2f}",
                    f"{item.deposit_paid:.2f}",
                    "Paid" if item.is_paid else "Pending",
                ]
            )
        return buffer.getvalue()

    def reservation_activity(self, *, period: str = "today", now: Optional[datetime] = None) -> ReservationActivity:
        now = now or datetime.now(tz=timezone.utc)
        range_start, range_end = activity_range(period, now)
        items = [
            item
            for item in self.reservations.list_reservations()
            if range_start <= _as_utc(item.created_at) < range_end
        ]
        items.sort(key=lambda item: _as_utc(item.created_at), reverse=True)

        fully_paid = sum(1 for item in items if item.fully_paid)
        total_revenue = _sum(item.total_price for item in items)
        return ReservationActivity(
            period=period,
            total_reservations=len(items),
            total_revenue=total_revenue,
            total_deposits=_sum(item.deposit_paid for item in items),
            average_ticket=_average(total_revenue, len(items)),
            fully_paid_count=fully_paid,
            pending_count=len(items) - fully_paid,
            items=items,
        )
