from .analytics import EconomicsSummary, ReservationActivity
from .auth import ActivityResponse, LoginRequest, LoginResponse, SessionRead
from .common import SystemHealth
from .document import DocumentResponse
from .notification import DailyDigestFailure, DailyDigestRequest, DailyDigestResponse
from .reservation import ReservationCreate, ReservationRead, ReservationUpdate
from .staff import StaffCreateRequest, StaffRead, StaffUpdateRequest

__all__ = [
    "ActivityResponse",
    "DailyDigestFailure",
    "DailyDigestRequest",
    "DailyDigestResponse",
    "DocumentResponse",
    "EconomicsSummary",
    "LoginRequest",
    "LoginResponse",
    "ReservationActivity",
    "ReservationCreate",
    "ReservationRead",
    "ReservationUpdate",
    "SessionRead",
    "StaffCreateRequest",
    "StaffRead",
    "StaffUpdateRequest",
    "SystemHealth",
]
