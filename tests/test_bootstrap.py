from studio.core.config import get_settings
from studio.models import Staff, StaffRole
from studio.services.bootstrap import ensure_default_admin

API = "/api/v1"


def test_default_admin_is_created_and_can_log_in(client, db_session, monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_USERNAME", "owner")
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", "boot-pass")

    ensure_default_admin()
    ensure_default_admin()

    admins = db_session.query(Staff).filter(Staff.username == "owner").all()
    assert len(admins) == 1
    assert admins[0].role == StaffRole.ADMIN
    assert admins[0].permissions == ["reservations", "staff", "economics"]

    response = client.post(f"{API}/auth/login", json={"username": "owner", "password": "boot-pass"})
    assert response.status_code == 200


def test_bootstrap_skipped_without_password(db_session, monkeypatch):
    monkeypatch.setattr(get_settings(), "DEFAULT_ADMIN_PASSWORD", None)

    ensure_default_admin()

    assert db_session.query(Staff).count() == 0
