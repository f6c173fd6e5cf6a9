from .analytics_service import AnalyticsService
from .auth_service import AuthService
from .document_service import DocumentService
from .health_service import HealthService
from .notification_service import DailyDigestService, DigestResult, NewReservationNotifier
from .permissions import has_permission, permissions_for
from .reservation_service import ReservationCreated, ReservationService
from .staff_service import StaffService

__all__ = [
    "AnalyticsService",
    "AuthService",
    "DailyDigestService",
    "DigestResult",
    "DocumentService",
    "HealthService",
    "NewReservationNotifier",
    "ReservationCreated",
    "ReservationService",
    "StaffService",
    "has_permission",
    "permissions_for",
]
