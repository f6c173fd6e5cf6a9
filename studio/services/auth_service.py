import logging

from jwt import InvalidTokenError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studio.core import security
from studio.core.sessions import SessionExpired, SessionManager, StaffSession
from studio.models import Staff

from . import exceptions
from .permissions import permissions_for

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    def __init__(self, db: Session, sessions: SessionManager):
        self.db = db
        self.sessions = sessions

    def login(self, *, username: str, password: str, ip: str | None = None) -> tuple[StaffSession, str]:
        try:
            staff = self.db.query(Staff).filter(Staff.username == username).first()
        except SQLAlchemyError:
            logger.exception("Staff lookup failed during login")
            raise exceptions.AuthenticationError(INVALID_CREDENTIALS)

        if not staff or not security.verify_password(password, staff.password_hash):
            logger.info("Failed login attempt for %s from %s", username, ip or "unknown")
            raise exceptions.AuthenticationError(INVALID_CREDENTIALS)

        session = self.sessions.create(
            staff_id=staff.id,
            username=staff.username,
            name=staff.name,
            role=staff.role.value,
            permissions=permissions_for(staff.role),
        )
        token = security.create_access_token(
            subject=staff.id,
            session_id=session.session_id,
            additional_claims={"role": staff.role.value},
        )
        logger.info("Staff %s logged in", staff.username)
        return session, token

    def resume(self, token: str) -> StaffSession:
        """Resolve the session behind ``token`` and record the interaction."""

        session_id = self.session_id_from_token(token)
        if session_id is None:
            raise exceptions.AuthenticationError("Invalid token")
        try:
            session = self.sessions.touch(session_id)
        except SessionExpired as exc:
            raise exceptions.SessionExpiredError("Session expired due to inactivity") from exc
        if session is None:
            raise exceptions.AuthenticationError("Session not found")
        return session

    def logout(self, token: str | None) -> None:
        session_id = self.session_id_from_token(token) if token else None
        if session_id is not None:
            self.sessions.clear(session_id)

    @staticmethod
    def session_id_from_token(token: str) -> str | None:
        try:
            payload = security.decode_access_token(token)
        except InvalidTokenError:
            return None
        return payload.get("sid")
