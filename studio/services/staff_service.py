from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studio.core import security
from studio.core.cache import cache, invalidate_cache
from studio.models import Staff, StaffRole
from studio.schemas import StaffRead

from . import exceptions
from .permissions import permissions_for

logger = logging.getLogger(__name__)

STAFF_CACHE_NAMESPACE = "staff"
STAFF_CACHE_TTL_SECONDS = 300


@cache(ttl=STAFF_CACHE_TTL_SECONDS, namespace=STAFF_CACHE_NAMESPACE, key_builder=lambda db: "all")
def _load_staff_snapshot(db: Session) -> list[StaffRead]:
    rows = db.query(Staff).order_by(Staff.created_at.asc(), Staff.id.asc()).all()
    return [StaffRead.model_validate(row) for row in rows]


class StaffService:
    def __init__(self, db: Session):
        self.db = db

    def list_staff(self) -> list[StaffRead]:
        return _load_staff_snapshot(self.db)

    def list_artists(self) -> list[StaffRead]:
        return [member for member in self.list_staff() if member.role == StaffRole.ARTIST]

    def refresh(self) -> list[StaffRead]:
        invalidate_cache(STAFF_CACHE_NAMESPACE)
        return self.list_staff()

    def get_staff(self, staff_id: int) -> Staff:
        staff = self.db.query(Staff).filter(Staff.id == staff_id).first()
        if not staff:
            raise exceptions.NotFoundError("Staff not found")
        return staff

    def resolve_artist_name(self, artist_id: Optional[int]) -> Optional[str]:
        """Name of the assigned artist, or None when unassigned or the record is gone."""

        if artist_id is None:
            return None
        name = self.db.query(Staff.name).filter(Staff.id == artist_id).scalar()
        return name

    def artist_names(self) -> dict[int, str]:
        return {member.id: member.name for member in self.list_staff()}

    def create_staff(self, *, name: str, username: str, password: str, role: StaffRole) -> Staff:
        staff = Staff(
            name=name,
            username=username,
            password_hash=security.create_password_hash(password),
            role=role,
            permissions=permissions_for(role),
        )
        self.db.add(staff)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise exceptions.ConflictError("Staff with this username already exists") from exc

        self.db.refresh(staff)
        logger.info("Staff %s created with role %s", staff.username, staff.role.value)
        self.refresh()
        return staff

    def update_staff(
        self,
        staff_id: int,
        *,
        name: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        role: Optional[StaffRole] = None,
    ) -> Staff:
        staff = self.get_staff(staff_id)

        if username and username != staff.username:
            exists = (
                self.db.query(Staff.id)
                .filter(Staff.username == username, Staff.id != staff.id)
                .first()
            )
            if exists:
                raise exceptions.ConflictError("Staff with this username already exists")
            staff.username = username

        if name is not None:
            staff.name = name

        if role is not None:
            staff.role = role
            staff.permissions = permissions_for(role)

        if password:
            staff.password_hash = security.create_password_hash(password)

        staff.updated_at = datetime.now(tz=timezone.utc)
        self.db.add(staff)
        self.db.commit()
        self.db.refresh(staff)
        self.refresh()
        return staff

    def delete_staff(self, staff_id: int) -> None:
        staff = self.get_staff(staff_id)
        self.db.delete(staff)
        self.db.commit()
        logger.info("Staff %s deleted", staff.username)
        self.refresh()
