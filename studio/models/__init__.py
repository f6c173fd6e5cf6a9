from .base import Base
from .enums import PaymentTranche, Permission, StaffRole
from .reservation import Reservation, ReservationCounter
from .staff import Staff

__all__ = [
    "Base",
    "Reservation",
    "ReservationCounter",
    "Staff",
    "PaymentTranche",
    "Permission",
    "StaffRole",
]
