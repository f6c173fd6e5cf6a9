import json
import os
import sys
from pathlib import Path

import pytest
import anyio
import httpx
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("DATABASE_URL", "sqlite:///" + str(BASE_DIR / "test.db"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("SESSION_IDLE_TIMEOUT_MINUTES", "30")
os.environ.setdefault("TELEGRAM_API_BASE_URL", "https://telegram.test")
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "alert-token")
os.environ.setdefault("TELEGRAM_CHAT_ID", "-1001")
os.environ.setdefault("TELEGRAM_DAILY_BOT_TOKEN", "daily-token")
os.environ.setdefault("TELEGRAM_DAILY_CHAT_ID", "-1002")
os.environ.setdefault("DOCUMENT_WEBHOOK_URL", "https://documents.test/hook")
os.environ.setdefault("SCHEDULER_SECRET", "cron-secret")
os.environ["REDIS_URL"] = ""

from studio.core.config import get_settings
from studio.core import db as db_module
from studio.core.cache import InMemoryCacheBackend, cache_manager
from studio.core.dependencies import get_db, get_http_transport, get_session_manager, get_sleep
from studio.core.security import create_password_hash
from studio.core.sessions import SessionManager
from studio.models import Base, Staff, StaffRole
from studio.services.permissions import permissions_for
from studio.main import app

get_settings.cache_clear()

db_module._engine = None
db_module._SessionLocal = None
_db_path = BASE_DIR / "test.db"

API = "/api/v1"


def _create_engine():
    settings = get_settings()
    connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
    return create_engine(settings.DATABASE_URL, connect_args=connect_args)


def _create_session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="session")
def engine():
    engine = _create_engine()
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if _db_path.exists():
        _db_path.unlink()


@pytest.fixture(scope="session")
def session_factory(engine):
    return _create_session_factory(engine)


@pytest.fixture(autouse=True)
def clean_state(engine):
    cache_manager.use(InMemoryCacheBackend())
    yield
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())
    cache_manager.reset()


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


class FakeClock:
    def __init__(self, start: float = 1_750_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


class RecordingSleep:
    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture()
def sleeps():
    return RecordingSleep()


class FakeOutbound:
    """Records outbound HTTP calls and answers them from ``handler``."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.handler = self.default_handler

    @staticmethod
    def default_handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "documents.test":
            return httpx.Response(200, json={"success": True, "url": "https://documents.test/r.pdf"})
        return httpx.Response(200, json={"ok": True, "result": {}})

    def _dispatch(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._dispatch)

    def telegram_calls(self, method: str | None = None) -> list[httpx.Request]:
        calls = [request for request in self.requests if request.url.host == "telegram.test"]
        if method is not None:
            calls = [request for request in calls if request.url.path.endswith(f"/{method}")]
        return calls

    def sent_texts(self) -> list[str]:
        return [json.loads(request.content)["text"] for request in self.telegram_calls("sendMessage")]


@pytest.fixture()
def outbound():
    return FakeOutbound()


@pytest.fixture()
def session_manager(clock):
    return SessionManager(
        cache_manager.get_backend(),
        idle_timeout_seconds=get_settings().SESSION_IDLE_TIMEOUT_MINUTES * 60,
        clock=clock,
    )


@pytest.fixture()
def client(session_factory, session_manager, outbound, sleeps):
    def _get_test_db():
        db = session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_session_manager] = lambda: session_manager
    app.dependency_overrides[get_http_transport] = lambda: outbound.transport
    app.dependency_overrides[get_sleep] = lambda: sleeps

    class _SyncASGIClient:
        def __init__(self, fastapi_app):
            self._client = httpx.AsyncClient(
                transport=httpx.ASGITransport(app=fastapi_app),
                base_url="http://testserver",
            )

        def request(self, method: str, url: str, **kwargs):
            async def _do_request():
                return await self._client.request(method, url, **kwargs)

            return anyio.run(_do_request)

        def get(self, url: str, **kwargs):
            return self.request("GET", url, **kwargs)

        def post(self, url: str, **kwargs):
            return self.request("POST", url, **kwargs)

        def put(self, url: str, **kwargs):
            return self.request("PUT", url, **kwargs)

        def patch(self, url: str, **kwargs):
            return self.request("PATCH", url, **kwargs)

        def delete(self, url: str, **kwargs):
            return self.request("DELETE", url, **kwargs)

        def close(self):
            async def _do_close():
                await self._client.aclose()

            anyio.run(_do_close)

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            self.close()

    with _SyncASGIClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def make_staff(db_session):
    def _make_staff(username: str, password: str = "secret-pass", role: StaffRole = StaffRole.STAFF, name: str | None = None):
        staff = Staff(
            name=name or username.title(),
            username=username,
            password_hash=create_password_hash(password),
            role=role,
            permissions=permissions_for(role),
        )
        db_session.add(staff)
        db_session.commit()
        db_session.refresh(staff)
        return staff

    return _make_staff


@pytest.fixture()
def login(client):
    def _login(username: str, password: str = "secret-pass") -> dict[str, str]:
        response = client.post(f"{API}/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture()
def admin_headers(make_staff, login):
    make_staff("boss", role=StaffRole.ADMIN, name="Studio Boss")
    return login("boss")


@pytest.fixture()
def staff_headers(make_staff, login):
    make_staff("desk", role=StaffRole.STAFF, name="Front Desk")
    return login("desk")
