from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from studio.core.dependencies import get_current_session, get_db, get_optional_token, get_session_manager
from studio.core.sessions import SessionManager, StaffSession
from studio.schemas import ActivityResponse, LoginRequest, LoginResponse, SessionRead
from studio.services import AuthService
from studio.services import exceptions as service_exceptions

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_read(session: StaffSession, sessions: SessionManager) -> SessionRead:
    return SessionRead(
        id=session.id,
        username=session.username,
        name=session.name,
        role=session.role,
        permissions=session.permissions,
        expires_at=datetime.fromtimestamp(sessions.expires_at(session), tz=timezone.utc),
    )


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> LoginResponse:
    service = AuthService(db, sessions)
    try:
        session, token = service.login(
            username=payload.username,
            password=payload.password,
            ip=getattr(request.state, "ip", None),
        )
    except service_exceptions.AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    return LoginResponse(staff=_session_read(session, sessions), access_token=token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    token: str | None = Depends(get_optional_token),
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> None:
    AuthService(db, sessions).logout(token)


@router.get("/me", response_model=SessionRead)
def read_session(
    session: StaffSession = Depends(get_current_session),
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionRead:
    return _session_read(session, sessions)


@router.post("/activity", response_model=ActivityResponse)
def record_activity(
    session: StaffSession = Depends(get_current_session),
    sessions: SessionManager = Depends(get_session_manager),
) -> ActivityResponse:
    return ActivityResponse(expires_at=datetime.fromtimestamp(sessions.expires_at(session), tz=timezone.utc))
