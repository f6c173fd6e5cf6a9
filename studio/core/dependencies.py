import time
from typing import Callable

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from studio.core.cache import cache_manager
from studio.core.config import get_settings
from studio.core.db import get_db_session
from studio.core.sessions import SessionManager, StaffSession
from studio.models import Permission
from studio.services import AuthService, NewReservationNotifier, has_permission
from studio.services import exceptions as service_exceptions
from studio.services.reservation_service import PostCommitHook


bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Session:
    yield from get_db_session()


def get_session_manager() -> SessionManager:
    settings = get_settings()
    return SessionManager(
        cache_manager.get_backend(),
        idle_timeout_seconds=settings.SESSION_IDLE_TIMEOUT_MINUTES * 60,
    )


def get_http_transport() -> httpx.BaseTransport | None:
    """Outbound transport for webhook and bot calls; None means the real network."""

    return None


def get_sleep() -> Callable[[float], None]:
    return time.sleep


def get_reservation_hooks(
    transport: httpx.BaseTransport | None = Depends(get_http_transport),
) -> list[PostCommitHook]:
    return [NewReservationNotifier(transport=transport)]


def get_optional_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return credentials.credentials


def _get_token(token: str | None = Depends(get_optional_token)) -> str:
    if token is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return token


def get_current_session(
    token: str = Depends(_get_token),
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> StaffSession:
    try:
        return AuthService(db, sessions).resume(token)
    except service_exceptions.AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc


def require_permission(permission: Permission) -> Callable[..., StaffSession]:
    def _dependency(session: StaffSession = Depends(get_current_session)) -> StaffSession:
        if not has_permission(session.role, permission):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return session

    return _dependency
