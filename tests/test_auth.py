from studio.models import Staff, StaffRole

API = "/api/v1"


def test_login_returns_session_and_token(client, make_staff):
    make_staff("ink", password="needle-42", role=StaffRole.ARTIST, name="Ink Master")

    response = client.post(f"{API}/auth/login", json={"username": "ink", "password": "needle-42"})
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["staff"]["username"] == "ink"
    assert data["staff"]["name"] == "Ink Master"
    assert data["staff"]["role"] == "artist"
    assert data["staff"]["permissions"] == ["reservations"]


def test_login_failures_are_indistinguishable(client, make_staff):
    make_staff("ink", password="needle-42")

    wrong_password = client.post(f"{API}/auth/login", json={"username": "ink", "password": "nope"})
    unknown_user = client.post(f"{API}/auth/login", json={"username": "ghost", "password": "needle-42"})
    wrong_case = client.post(f"{API}/auth/login", json={"username": "INK", "password": "needle-42"})

    for response in (wrong_password, unknown_user, wrong_case):
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"


def test_password_is_never_stored_in_plaintext(client, admin_headers, db_session):
    response = client.post(
        f"{API}/staff",
        json={"name": "New Artist", "username": "newbie", "password": "plain-text", "role": "artist"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert "password" not in response.json()
    assert "password_hash" not in response.json()

    stored = db_session.query(Staff).filter(Staff.username == "newbie").one()
    assert stored.password_hash != "plain-text"


def test_me_requires_token(client):
    response = client.get(f"{API}/auth/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


def test_invalid_token_is_rejected(client):
    response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_session_expires_after_idle_timeout(client, staff_headers, clock):
    assert client.get(f"{API}/auth/me", headers=staff_headers).status_code == 200

    clock.advance(30 * 60)

    response = client.get(f"{API}/auth/me", headers=staff_headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Session expired due to inactivity"

    # The expired session is gone for good.
    again = client.get(f"{API}/auth/me", headers=staff_headers)
    assert again.status_code == 401
    assert again.json()["detail"] == "Session not found"


def test_activity_keeps_session_alive(client, staff_headers, clock):
    clock.advance(29 * 60)
    activity = client.post(f"{API}/auth/activity", headers=staff_headers)
    assert activity.status_code == 200

    clock.advance(29 * 60)
    assert client.get(f"{API}/auth/me", headers=staff_headers).status_code == 200

    clock.advance(29 * 60)
    assert client.get(f"{API}/reservations", headers=staff_headers).status_code == 200


def test_activity_reports_new_expiry(client, staff_headers, clock):
    before = client.post(f"{API}/auth/activity", headers=staff_headers).json()["expires_at"]
    clock.advance(60)
    after = client.post(f"{API}/auth/activity", headers=staff_headers).json()["expires_at"]
    assert after > before


def test_logout_clears_session(client, staff_headers):
    response = client.post(f"{API}/auth/logout", headers=staff_headers)
    assert response.status_code == 204

    me = client.get(f"{API}/auth/me", headers=staff_headers)
    assert me.status_code == 401


def test_logout_without_session_still_succeeds(client):
    assert client.post(f"{API}/auth/logout").status_code == 204
    assert client.post(f"{API}/auth/logout", headers={"Authorization": "Bearer junk"}).status_code == 204
