from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studio.core.cache import cache, invalidate_cache
from studio.core.config import get_settings
from studio.models import PaymentTranche, Reservation, ReservationCounter
from studio.schemas import ReservationRead

from . import exceptions
from .staff_service import StaffService

logger = logging.getLogger(__name__)

RESERVATIONS_CACHE_NAMESPACE = "reservations"
RESERVATIONS_CACHE_TTL_SECONDS = 300
COUNTER_ROW_ID = 1

UPDATABLE_FIELDS = frozenset(
    {
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
        "notes",
        "artist_id",
    }
)


@dataclass(frozen=True)
class ReservationCreated:
    reservation: ReservationRead
    artist_name: Optional[str]


PostCommitHook = Callable[[ReservationCreated], None]


@cache(
    ttl=RESERVATIONS_CACHE_TTL_SECONDS,
    namespace=RESERVATIONS_CACHE_NAMESPACE,
    key_builder=lambda db: "all",
)
def _load_reservation_snapshot(db: Session) -> list[ReservationRead]:
    rows = (
        db.query(Reservation)
        .order_by(Reservation.appointment_date.asc(), Reservation.appointment_time.asc(), Reservation.id.asc())
        .all()
    )
    return [ReservationRead.model_validate(row) for row in rows]


def _matches_search(reservation: ReservationRead, term: str) -> bool:
    lowered = term.lower()
    return (
        term in str(reservation.reservation_number)
        or lowered in reservation.first_name.lower()
        or lowered in reservation.last_name.lower()
        or term in reservation.phone
    )


class ReservationService:
    def __init__(self, db: Session, *, post_commit_hooks: Sequence[PostCommitHook] = ()):
        self.db = db
        self.post_commit_hooks = list(post_commit_hooks)
        self.settings = get_settings()

    # Reads

    def list_reservations(
        self,
        *,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[ReservationRead]:
        items: Iterable[ReservationRead] = _load_reservation_snapshot(self.db)
        if search:
            items = [item for item in items if _matches_search(item, search)]
        if date_from is not None:
            items = [item for item in items if item.appointment_date >= date_from]
        if date_to is not None:
            items = [item for item in items if item.appointment_date <= date_to]
        return list(items)

    def list_for_date(self, target_date: date) -> list[Reservation]:
        return (
            self.db.query(Reservation)
            .filter(Reservation.appointment_date == target_date)
            .order_by(Reservation.appointment_time.asc(), Reservation.id.asc())
            .all()
        )

    def refresh(self) -> list[ReservationRead]:
        invalidate_cache(RESERVATIONS_CACHE_NAMESPACE)
        return self.list_reservations()

    def get_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.db.query(Reservation).filter(Reservation.id == reservation_id).first()
        if not reservation:
            raise exceptions.NotFoundError("Reservation not found")
        return reservation

    # Numbering

    def next_reservation_number(self) -> int:
        highest_existing = self.db.query(func.max(Reservation.reservation_number)).scalar()
        counter = self.db.get(ReservationCounter, COUNTER_ROW_ID)
        issued = [value for value in (highest_existing, counter.last_number if counter else None) if value is not None]
        if not issued:
            return self.settings.RESERVATION_NUMBER_SEED
        return max(issued) + 1

    def _record_issued_number(self, number: int) -> None:
        counter = self.db.get(ReservationCounter, COUNTER_ROW_ID)
        if counter is None:
            self.db.add(ReservationCounter(id=COUNTER_ROW_ID, last_number=number))
        elif number > counter.last_number:
            counter.last_number = number

    # Mutations

    def create_reservation(self, data: dict[str, Any]) -> Reservation:
        number = self.next_reservation_number()
        reservation = Reservation(
            reservation_number=number,
            **{field: value for field, value in data.items() if field in UPDATABLE_FIELDS},
        )
        if reservation.design_images is None:
            reservation.design_images = []
        self.db.add(reservation)
        self._record_issued_number(number)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise exceptions.ConflictError("Reservation number already taken, please retry") from exc
        self.db.refresh(reservation)
        logger.info("Reservation #%s created", reservation.reservation_number)

        artist_name = StaffService(self.db).resolve_artist_name(reservation.artist_id)
        self._run_post_commit_hooks(
            ReservationCreated(reservation=ReservationRead.model_validate(reservation), artist_name=artist_name)
        )
        self.refresh()
        return reservation

    def update_reservation(self, reservation_id: int, changes: dict[str, Any]) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS:
                continue
            setattr(reservation, field, value)
        if changes.get("rest_paid_status") is True:
            reservation.is_paid = True
        reservation.updated_at = datetime.now(tz=timezone.utc)
        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)
        self.refresh()
        return reservation

    def toggle_payment(self, reservation_id: int, tranche: PaymentTranche) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        if tranche == PaymentTranche.DEPOSIT:
            changes = {"deposit_paid_status": not reservation.deposit_paid_status}
        else:
            changes = {"rest_paid_status": not reservation.rest_paid_status}
        return self.update_reservation(reservation_id, changes)

    def delete_reservation(self, reservation_id: int) -> None:
        reservation = self.get_reservation(reservation_id)
        number = reservation.reservation_number
        self.db.delete(reservation)
        self.db.commit()
        logger.info("Reservation #%s deleted", number)
        self.refresh()

    def _run_post_commit_hooks(self, event: ReservationCreated) -> None:
        for hook in self.post_commit_hooks:
            try:
                hook(event)
            except Exception:
                logger.exception(
                    "Post-commit hook %r failed for reservation #%s",
                    hook,
                    event.reservation.reservation_number,
                )
