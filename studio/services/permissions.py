from studio.models import Permission, StaffRole

ROLE_PERMISSIONS: dict[StaffRole, tuple[Permission, ...]] = {
    StaffRole.ADMIN: (Permission.RESERVATIONS, Permission.STAFF, Permission.ECONOMICS),
    StaffRole.STAFF: (Permission.RESERVATIONS,),
    StaffRole.ARTIST: (Permission.RESERVATIONS,),
}


def permissions_for(role: StaffRole | str) -> list[str]:
    """Return the capability strings granted to ``role``."""

    return [permission.value for permission in ROLE_PERMISSIONS[StaffRole(role)]]


def has_permission(role: StaffRole | str, permission: Permission | str) -> bool:
    role = StaffRole(role)
    if role == StaffRole.ADMIN:
        return True
    return Permission(permission).value in permissions_for(role)
