from datetime import date, datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from studio.core.dependencies import get_db, require_permission
from studio.core.sessions import StaffSession
from studio.models import Permission
from studio.schemas import EconomicsSummary, ReservationActivity
from studio.services import AnalyticsService
from studio.services import exceptions as service_exceptions
from studio.services.analytics_service import economics_range

router = APIRouter(prefix="/analytics", tags=["analytics"])

can_view_economics = require_permission(Permission.ECONOMICS)
can_manage_reservations = require_permission(Permission.RESERVATIONS)

EconomicsPeriod = Literal["today", "week", "month", "custom"]


@router.get("/economics", response_model=EconomicsSummary)
def economics(
    period: EconomicsPeriod = Query(default="today"),
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    session: StaffSession = Depends(can_view_economics),
    db: Session = Depends(get_db),
) -> EconomicsSummary:
    service = AnalyticsService(db)
    try:
        return service.economics(period=period, start=start, end=end)
    except service_exceptions.ServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/economics/export")
def export_economics(
    period: EconomicsPeriod = Query(default="today"),
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    session: StaffSession = Depends(can_view_economics),
    db: Session = Depends(get_db),
) -> Response:
    today = datetime.now(tz=timezone.utc).date()
    try:
        range_start, range_end = economics_range(period, today, start, end)
    except service_exceptions.ServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    content = AnalyticsService(db).export_economics_csv(range_start, range_end)
    filename = f"economics-{range_start.isoformat()}-{range_end.isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/reservations", response_model=ReservationActivity)
def reservation_activity(
    period: Literal["today", "yesterday", "week", "month"] = Query(default="today"),
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
) -> ReservationActivity:
    return AnalyticsService(db).reservation_activity(period=period)
