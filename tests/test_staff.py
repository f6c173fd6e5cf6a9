from studio.models import StaffRole

API = "/api/v1"


def _create(client, headers, **overrides):
    payload = {"name": "Vera Lines", "username": "vera", "password": "pw-123", "role": "artist"}
    payload.update(overrides)
    return client.post(f"{API}/staff", json=payload, headers=headers)


def test_admin_creates_staff_with_role_permissions(client, admin_headers):
    artist = _create(client, admin_headers)
    assert artist.status_code == 201
    assert artist.json()["permissions"] == ["reservations"]

    admin = _create(client, admin_headers, username="second-admin", role="admin")
    assert admin.json()["permissions"] == ["reservations", "staff", "economics"]


def test_staff_list_is_ordered_by_creation(client, admin_headers):
    _create(client, admin_headers, username="first")
    _create(client, admin_headers, username="second")

    response = client.get(f"{API}/staff", headers=admin_headers)
    assert response.status_code == 200
    assert [member["username"] for member in response.json()] == ["boss", "first", "second"]


def test_duplicate_username_conflicts(client, admin_headers):
    assert _create(client, admin_headers).status_code == 201
    duplicate = _create(client, admin_headers, name="Other Vera")
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Staff with this username already exists"


def test_update_role_rederives_permissions(client, admin_headers):
    staff_id = _create(client, admin_headers, role="staff").json()["id"]

    response = client.put(f"{API}/staff/{staff_id}", json={"role": "admin"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert response.json()["permissions"] == ["reservations", "staff", "economics"]


def test_update_password_allows_login_with_new_password(client, admin_headers, login):
    staff_id = _create(client, admin_headers).json()["id"]

    response = client.put(f"{API}/staff/{staff_id}", json={"password": "fresh-pass"}, headers=admin_headers)
    assert response.status_code == 200

    assert client.post(f"{API}/auth/login", json={"username": "vera", "password": "pw-123"}).status_code == 401
    assert login("vera", "fresh-pass")


def test_empty_update_is_rejected(client, admin_headers):
    staff_id = _create(client, admin_headers).json()["id"]
    response = client.put(f"{API}/staff/{staff_id}", json={}, headers=admin_headers)
    assert response.status_code == 422


def test_delete_staff_leaves_reservations_untouched(client, admin_headers):
    artist_id = _create(client, admin_headers).json()["id"]
    reservation = client.post(
        f"{API}/reservations",
        json={
            "first_name": "Ana",
            "last_name": "Silva",
            "phone": "+351900000000",
            "appointment_date": "2026-11-02",
            "appointment_time": "10:00",
            "total_price": "200",
            "artist_id": artist_id,
        },
        headers=admin_headers,
    ).json()

    assert client.delete(f"{API}/staff/{artist_id}", headers=admin_headers).status_code == 204
    assert client.get(f"{API}/staff/{artist_id}", headers=admin_headers).status_code == 404

    kept = client.get(f"{API}/reservations/{reservation['id']}", headers=admin_headers)
    assert kept.status_code == 200
    assert kept.json()["artist_id"] == artist_id


def test_artists_listing_filters_by_role(client, admin_headers, staff_headers):
    _create(client, admin_headers, username="artist-one", role="artist")
    _create(client, admin_headers, username="clerk", role="staff")

    response = client.get(f"{API}/staff/artists", headers=staff_headers)
    assert response.status_code == 200
    assert [member["username"] for member in response.json()] == ["artist-one"]


def test_non_admin_cannot_manage_staff(client, staff_headers):
    assert client.get(f"{API}/staff", headers=staff_headers).status_code == 403
    response = _create(client, staff_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Insufficient permissions"


def test_missing_staff_is_not_found(client, admin_headers):
    assert client.delete(f"{API}/staff/9999", headers=admin_headers).status_code == 404
    assert client.put(f"{API}/staff/9999", json={"name": "X"}, headers=admin_headers).status_code == 404
