import logging
from datetime import date, timedelta
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from studio.core.config import get_settings
from studio.core.dependencies import get_db, get_http_transport, get_sleep, require_permission
from studio.core.sessions import StaffSession
from studio.models import Permission
from studio.schemas import DailyDigestFailure, DailyDigestRequest, DailyDigestResponse
from studio.services import DailyDigestService
from studio.services import exceptions as service_exceptions
from studio.services.notification_service import utc_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])

can_manage_reservations = require_permission(Permission.RESERVATIONS)

DIGEST_RESPONSES = {500: {"model": DailyDigestFailure}}


def _require_scheduler_secret(secret: Optional[str] = Header(default=None, alias="X-Scheduler-Secret")) -> None:
    expected = get_settings().SCHEDULER_SECRET
    if not expected:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    if not secret or secret != expected:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def _failure(error: str) -> JSONResponse:
    failure = DailyDigestFailure(error=error)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=failure.model_dump())


def _send_digest(service: DailyDigestService, target_date: date, manual: bool):
    try:
        result = service.send_digest(target_date=target_date, manual=manual)
    except service_exceptions.ServiceError as exc:
        logger.error("Daily digest for %s failed: %s", target_date, exc)
        return _failure(str(exc))
    except Exception:
        logger.exception("Daily digest for %s failed unexpectedly", target_date)
        return _failure("Daily digest failed unexpectedly")
    return DailyDigestResponse(
        success=result.success,
        message=result.message,
        reservationsCount=result.reservations_count,
        date=result.date,
        manual=result.manual,
    )


@router.post("/daily-digest", response_model=DailyDigestResponse, responses=DIGEST_RESPONSES)
def send_daily_digest(
    payload: Optional[DailyDigestRequest] = None,
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
    transport=Depends(get_http_transport),
    sleep: Callable[[float], None] = Depends(get_sleep),
):
    payload = payload or DailyDigestRequest()
    service = DailyDigestService(db, transport=transport, sleep=sleep)
    return _send_digest(service, payload.date or utc_today(), payload.manual)


@router.post("/daily-digest/tomorrow", response_model=DailyDigestResponse, responses=DIGEST_RESPONSES)
def send_tomorrow_digest(
    session: StaffSession = Depends(can_manage_reservations),
    db: Session = Depends(get_db),
    transport=Depends(get_http_transport),
    sleep: Callable[[float], None] = Depends(get_sleep),
):
    service = DailyDigestService(db, transport=transport, sleep=sleep)
    return _send_digest(service, utc_today() + timedelta(days=1), True)


@router.post(
    "/daily-digest/scheduled",
    response_model=DailyDigestResponse,
    responses=DIGEST_RESPONSES,
    dependencies=[Depends(_require_scheduler_secret)],
)
def send_scheduled_digest(
    db: Session = Depends(get_db),
    transport=Depends(get_http_transport),
    sleep: Callable[[float], None] = Depends(get_sleep),
):
    service = DailyDigestService(db, transport=transport, sleep=sleep)
    return _send_digest(service, utc_today(), False)
