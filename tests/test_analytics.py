import csv
import io
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

import pytest

from studio.models import Reservation
from studio.services import AnalyticsService
from studio.services import exceptions as service_exceptions
from studio.services.analytics_service import activity_range, economics_range

API = "/api/v1"


def _add(session, number, day, *, total="100", deposit="30", deposit_paid=False, rest_paid=False, created_at=None, **fields):
    reservation = Reservation(
        reservation_number=number,
        first_name=fields.pop("first_name", f"Client{number}"),
        last_name="Test",
        phone=fields.pop("phone", "+351900000000"),
        appointment_date=day,
        appointment_time=time(12, 0),
        total_price=Decimal(total),
        deposit_paid=Decimal(deposit),
        deposit_paid_status=deposit_paid,
        rest_paid_status=rest_paid,
        is_paid=rest_paid,
        design_images=[],
        **fields,
    )
    if created_at is not None:
        reservation.created_at = created_at
    session.add(reservation)
    session.commit()
    return reservation


def test_economics_range_periods():
    wednesday = date(2026, 11, 4)
    assert economics_range("today", wednesday) == (wednesday, wednesday)
    assert economics_range("week", wednesday) == (date(2026, 11, 1), wednesday)
    assert economics_range("week", date(2026, 11, 1)) == (date(2026, 11, 1), date(2026, 11, 1))
    assert economics_range("month", wednesday) == (date(2026, 11, 1), wednesday)
    assert economics_range("custom", wednesday, date(2026, 1, 1), date(2026, 2, 1)) == (
        date(2026, 1, 1),
        date(2026, 2, 1),
    )
    with pytest.raises(service_exceptions.ServiceError):
        economics_range("custom", wednesday)


def test_activity_range_periods():
    now = datetime(2026, 11, 4, 15, 0, tzinfo=timezone.utc)
    midnight = datetime(2026, 11, 4, tzinfo=timezone.utc)
    assert activity_range("today", now) == (midnight, midnight + timedelta(days=1))
    assert activity_range("yesterday", now) == (midnight - timedelta(days=1), midnight)
    assert activity_range("week", now)[0] == midnight - timedelta(days=7)
    assert activity_range("month", now)[0] == midnight - timedelta(days=30)


def test_economics_summary(db_session):
    _add(db_session, 1290, date(2026, 11, 2), total="200", deposit="50", deposit_paid=True, rest_paid=True)
    _add(db_session, 1291, date(2026, 11, 3), total="100", deposit="40", deposit_paid=True)
    _add(db_session, 1292, date(2026, 11, 4), total="60", deposit="0")
    _add(db_session, 1293, date(2026, 10, 31), total="999", deposit="10")

    summary = AnalyticsService(db_session).economics(period="week", today=date(2026, 11, 4))

    assert summary.start == date(2026, 11, 1)
    assert summary.total_reservations == 3
    assert summary.total_revenue == Decimal("360")
    assert summary.total_deposits == Decimal("90")
    assert summary.actual_deposits_collected == Decimal("90")
    assert summary.total_paid == Decimal("200")
    assert summary.pending_revenue == Decimal("120")
    assert summary.deposits_paid_count == 2
    assert summary.rest_paid_count == 1
    assert summary.fully_paid_count == 1
    assert summary.pending_reservations == 2
    assert summary.average_ticket == Decimal("120.00")


def test_reservation_activity_uses_creation_time(db_session):
    now = datetime(2026, 11, 4, 15, 0, tzinfo=timezone.utc)
    _add(db_session, 1290, date(2026, 12, 1), total="80", created_at=now - timedelta(hours=2))
    _add(db_session, 1291, date(2026, 12, 2), total="120", deposit_paid=True, rest_paid=True, created_at=now - timedelta(hours=1))
    _add(db_session, 1292, date(2026, 11, 4), total="50", created_at=now - timedelta(days=1))

    today = AnalyticsService(db_session).reservation_activity(period="today", now=now)

    assert today.total_reservations == 2
    assert [item.reservation_number for item in today.items] == [1291, 1290]
    assert today.total_revenue == Decimal("200")
    assert today.fully_paid_count == 1
    assert today.pending_count == 1
    assert today.average_ticket == Decimal("100.00")

    yesterday = AnalyticsService(db_session).reservation_activity(period="yesterday", now=now)
    assert [item.reservation_number for item in yesterday.items] == [1292]


def test_economics_export_csv(client, admin_headers, db_session, make_staff):
    artist = make_staff("vera", name="Vera Lines")
    _add(db_session, 1290, date(2026, 11, 2), total="200", deposit="50", rest_paid=True, artist_id=artist.id, first_name="Ana")
    _add(db_session, 1291, date(2026, 11, 3), total="100", deposit="40", first_name="Rui")

    response = client.get(
        f"{API}/analytics/economics/export",
        params={"period": "custom", "start": "2026-11-01", "end": "2026-11-30"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "economics-2026-11-01-2026-11-30.csv" in response.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0] == ["Date", "Client", "Phone", "Artist", "Total Price", "Deposit", "Status"]
    assert rows[1] == ["2026-11-02", "Ana Test", "+351900000000", "Vera Lines", "200.00", "50.00", "Paid"]
    assert rows[2][3] == "Not assigned"
    assert rows[2][6] == "Pending"


def test_economics_endpoint_custom_period(client, admin_headers, db_session):
    _add(db_session, 1290, date(2026, 11, 2), total="200")

    response = client.get(
        f"{API}/analytics/economics",
        params={"period": "custom", "start": "2026-11-01", "end": "2026-11-30"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["total_reservations"] == 1
    assert Decimal(response.json()["total_revenue"]) == Decimal("200")


def test_custom_period_without_dates_is_bad_request(client, admin_headers):
    response = client.get(f"{API}/analytics/economics", params={"period": "custom"}, headers=admin_headers)
    assert response.status_code == 400


def test_economics_requires_economics_permission(client, staff_headers):
    response = client.get(f"{API}/analytics/economics", headers=staff_headers)
    assert response.status_code == 403


def test_activity_view_is_open_to_reservation_staff(client, staff_headers):
    response = client.get(f"{API}/analytics/reservations", params={"period": "week"}, headers=staff_headers)
    assert response.status_code == 200
    assert response.json()["total_reservations"] == 0
