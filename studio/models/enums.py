from enum import Enum


class StaffRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    ARTIST = "artist"


class Permission(str, Enum):
    RESERVATIONS = "reservations"
    STAFF = "staff"
    ECONOMICS = "economics"


class PaymentTranche(str, Enum):
    DEPOSIT = "deposit"
    REST = "rest"
