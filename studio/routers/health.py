from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studio.core.dependencies import get_db
from studio.schemas import SystemHealth
from studio.services import HealthService

router = APIRouter(tags=["health"])


@router.get("/health", response_model=list[SystemHealth])
def health_check(db: Session = Depends(get_db)):
    service = HealthService(db)
    return service.system_health()
