import logging

from sqlalchemy.exc import IntegrityError
from passlib.exc import UnknownHashError

from studio.core import security
from studio.core.config import get_settings
from studio.core.db import session_scope
from studio.models import Staff, StaffRole

from .permissions import permissions_for

logger = logging.getLogger(__name__)


def ensure_default_admin() -> None:
    """Create or update the default admin account defined via environment variables."""

    settings = get_settings()
    username = (settings.DEFAULT_ADMIN_USERNAME or "").strip()
    password = settings.DEFAULT_ADMIN_PASSWORD
    name = (settings.DEFAULT_ADMIN_NAME or "Admin").strip() or "Admin"

    if not username or not password:
        logger.warning("Default admin bootstrap skipped: username or password not configured")
        return

    with session_scope() as db:
        admin = db.query(Staff).filter(Staff.username == username).first()
        if admin:
            updated = False
            if admin.role != StaffRole.ADMIN:
                admin.role = StaffRole.ADMIN
                updated = True
            if admin.permissions != permissions_for(StaffRole.ADMIN):
                admin.permissions = permissions_for(StaffRole.ADMIN)
                updated = True
            if admin.name != name:
                admin.name = name
                updated = True
            try:
                needs_password_update = not security.verify_password(password, admin.password_hash)
            except (ValueError, UnknownHashError):
                needs_password_update = True
            if needs_password_update:
                admin.password_hash = security.create_password_hash(password)
                updated = True
            if updated:
                logger.info("Default admin '%s' updated", username)
            return

        admin = Staff(
            name=name,
            username=username,
            password_hash=security.create_password_hash(password),
            role=StaffRole.ADMIN,
            permissions=permissions_for(StaffRole.ADMIN),
        )
        db.add(admin)
        try:
            db.flush()
        except IntegrityError:
            logger.warning(
                "Default admin bootstrap encountered integrity error (username=%s). Another process may have created it.",
                username,
            )
            db.rollback()
        else:
            logger.info("Default admin '%s' created", username)
