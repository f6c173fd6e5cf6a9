from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from studio.core.dependencies import get_db, require_permission
from studio.core.sessions import StaffSession
from studio.models import Permission
from studio.schemas import StaffCreateRequest, StaffRead, StaffUpdateRequest
from studio.services import StaffService
from studio.services import exceptions as service_exceptions

router = APIRouter(prefix="/staff", tags=["staff"])

can_manage_staff = require_permission(Permission.STAFF)
can_manage_reservations = require_permission(Permission.RESERVATIONS)


@router.get("", response_model=list[StaffRead])
def list_staff(
    session: StaffSession = Depends(can_manage_staff),
    db: Session = Depends(get_db),
) -> list[StaffRead]:
    return StaffService(db).list_staff()


@router.get("/artists", response_model=list[StaffRead])
def list_artists(
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
) -> list[StaffRead]:
    return StaffService(db).list_artists()


@router.post("", response_model=StaffRead, status_code=status.HTTP_201_CREATED)
def create_staff(
    payload: StaffCreateRequest,
    session: StaffSession = Depends(can_manage_staff),
    db: Session = Depends(get_db),
) -> StaffRead:
    service = StaffService(db)
    try:
        staff = service.create_staff(
            name=payload.name,
            username=payload.username,
            password=payload.password,
            role=payload.role,
        )
    except service_exceptions.ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return StaffRead.model_validate(staff)


@router.get("/{staff_id}", response_model=StaffRead)
def get_staff(
    staff_id: int,
    session: StaffSession = Depends(can_manage_staff),
    db: Session = Depends(get_db),
) -> StaffRead:
    try:
        staff = StaffService(db).get_staff(staff_id)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return StaffRead.model_validate(staff)


@router.put("/{staff_id}", response_model=StaffRead)
def update_staff(
    staff_id: int,
    payload: StaffUpdateRequest,
    session: StaffSession = Depends(can_manage_staff),
    db: Session = Depends(get_db),
) -> StaffRead:
    data = payload.model_dump(exclude_unset=True)
    service = StaffService(db)
    try:
        staff = service.update_staff(
            staff_id,
            name=data.get("name"),
            username=data.get("username"),
            password=data.get("password"),
            role=data.get("role"),
        )
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except service_exceptions.ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return StaffRead.model_validate(staff)


@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_staff(
    staff_id: int,
    session: StaffSession = Depends(can_manage_staff),
    db: Session = Depends(get_db),
) -> None:
    try:
        StaffService(db).delete_staff(staff_id)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
