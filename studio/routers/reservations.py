from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from studio.core.config import get_settings
from studio.core.dependencies import get_db, get_http_transport, get_reservation_hooks, require_permission
from studio.core.sessions import StaffSession
from studio.models import PaymentTranche, Permission
from studio.schemas import DocumentResponse, ReservationCreate, ReservationRead, ReservationUpdate
from studio.services import DocumentService, ReservationService, StaffService
from studio.services import exceptions as service_exceptions
from studio.services.document_service import FALLBACK_WARNING, render_print_preview
from studio.services.reservation_service import PostCommitHook

router = APIRouter(prefix="/reservations", tags=["reservations"])

can_manage_reservations = require_permission(Permission.RESERVATIONS)


def _load(service: ReservationService, reservation_id: int) -> ReservationRead:
    try:
        reservation = service.get_reservation(reservation_id)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ReservationRead.model_validate(reservation)


@router.get("", response_model=list[ReservationRead])
def list_reservations(
    search: Optional[str] = Query(default=None, max_length=100),
    date_from: Optional[date] = Query(default=None),
    date_to: Optional[date] = Query(default=None),
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
) -> list[ReservationRead]:
    service = ReservationService(db)
    return service.list_reservations(search=search, date_from=date_from, date_to=date_to)


@router.post("", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
def create_reservation(
    payload: ReservationCreate,
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
    hooks: list[PostCommitHook] = Depends(get_reservation_hooks),
) -> ReservationRead:
    service = ReservationService(db, post_commit_hooks=hooks)
    try:
        reservation = service.create_reservation(payload.model_dump())
    except service_exceptions.ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return ReservationRead.model_validate(reservation)


@router.get("/{reservation_id}", response_model=ReservationRead)
def get_reservation(
    reservation_id: int,
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
) -> ReservationRead:
    return _load(ReservationService(db), reservation_id)


@router.patch("/{reservation_id}", response_model=ReservationRead)
def update_reservation(
    reservation_id: int,
    payload: ReservationUpdate,
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
) -> ReservationRead:
    service = ReservationService(db)
    try:
        reservation = service.update_reservation(reservation_id, payload.model_dump(exclude_unset=True))
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ReservationRead.model_validate(reservation)


@router.post("/{reservation_id}/payments/{tranche}/toggle", response_model=ReservationRead)
def toggle_payment(
    reservation_id: int,
    tranche: PaymentTranche,
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
) -> ReservationRead:
    service = ReservationService(db)
    try:
        reservation = service.toggle_payment(reservation_id, tranche)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ReservationRead.model_validate(reservation)


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reservation(
    reservation_id: int,
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
) -> None:
    try:
        ReservationService(db).delete_reservation(reservation_id)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("/{reservation_id}/document", response_model=DocumentResponse, response_model_exclude_none=True)
def generate_document(
    reservation_id: int,
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
    transport=Depends(get_http_transport),
) -> DocumentResponse:
    reservation = _load(ReservationService(db), reservation_id)
    artist_name = StaffService(db).resolve_artist_name(reservation.artist_id)
    result = DocumentService(transport=transport).generate(reservation, artist_name)
    if result.fallback:
        return DocumentResponse(
            success=False,
            filename=result.filename,
            fallback=True,
            warning=FALLBACK_WARNING,
            preview_url=f"{get_settings().API_V1_PREFIX}/reservations/{reservation_id}/print-preview",
            error=result.error,
        )
    return DocumentResponse(success=True, url=result.url, filename=result.filename)


@router.get("/{reservation_id}/print-preview", response_class=HTMLResponse)
def print_preview(
    reservation_id: int,
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
) -> HTMLResponse:
    reservation = _load(ReservationService(db), reservation_id)
    artist_name = StaffService(db).resolve_artist_name(reservation.artist_id)
    return HTMLResponse(render_print_preview(reservation, artist_name, get_settings().STUDIO_NAME))
