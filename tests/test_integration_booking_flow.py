"""
End-to-end booking flow through the HTTP blueprints:
quote -> create -> conflict -> checklist -> pay -> complete -> ledger.
"""
import pytest

from conftest import booking_form, login
from rentdesk.services.user_service import UserService


@pytest.fixture
def staff(client, fleet):
    login(client)
    return client


def _create(client, **overrides):
    r = client.post("/bookings", json=booking_form(**overrides))
    assert r.status_code == 201, r.get_json()
    return r.get_json()["booking"]


def test_quote_then_create(staff):
    q = staff.post("/bookings/quote", json=booking_form(amount_paid="150000")).get_json()
    assert q["pricing"]["total_price"] == 300000
    assert q["payment_status"] == "Partial"
    assert q["car_error"] == ""

    r = staff.post("/bookings", json=booking_form(amount_paid="150000"))
    body = r.get_json()
    assert r.status_code == 201
    assert body["message"] == "Booking saved (Status: Booked, Payment: Partial)"
    assert body["transaction"]["amount"] == 150000

    listed = staff.get("/bookings").get_json()["bookings"]
    assert [b["id"] for b in listed] == [body["booking"]["id"]]


def test_conflicting_booking_returns_409(staff):
    _create(staff)
    r = staff.post("/bookings", json=booking_form(customer_name="Cici"))
    assert r.status_code == 409
    assert r.get_json()["error"] == "CarUnavailableError"
    assert len(staff.get("/bookings").get_json()["bookings"]) == 1


def test_invalid_window_returns_400(staff):
    r = staff.post("/bookings", json=booking_form(end="2024-01-01T08:00"))
    assert r.status_code == 400
    assert r.get_json()["ok"] is False


def test_unknown_booking_returns_404(staff):
    assert staff.get("/bookings/nope").status_code == 404
    assert staff.post("/bookings/nope/cancel").status_code == 404


def test_availability_and_calendar(staff):
    b = _create(staff)
    res = staff.get("/bookings/availability", query_string={"start": "2024-01-01T10:00",
                                                              "end": "2024-01-01T12:00"}).get_json()
    assert [c["id"] for c in res["cars"]] == ["c2"]

    res = staff.get("/bookings/availability", query_string={"start": "2024-01-01T10:00", "end": "2024-01-01T12:00",
                                                              "exclude": b["id"]}).get_json()
    assert [c["id"] for c in res["cars"]] == ["c1", "c2"]

    cal = staff.get("/bookings/calendar/c1").get_json()["calendar"]
    assert [c["booking_id"] for c in cal] == [b["id"]]


def test_full_lifecycle(staff):
    b = _create(staff, amount_paid="100000")
    bid = b["id"]

    r = staff.post(f"/bookings/{bid}/checklist", json={"odometer": "1000", "fuel_level": "Full"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "ChecklistIncompleteError"

    r = staff.post(f"/bookings/{bid}/checklist", json={"odometer": "1000", "fuel_level": "Full",
                                                       "speedometer_image": "speedo.jpg"})
    assert r.status_code == 200
    assert r.get_json()["booking"]["status"] == "Active"
    assert r.get_json()["booking"]["checklist"]["checked_by"] == "Super Admin"

    detail = staff.get(f"/bookings/{bid}").get_json()
    assert detail["form"]["base_rate"] == 300000

    r = staff.post(f"/bookings/{bid}/pay-full", json={"payment_proof_image": "proof.jpg"})
    assert r.get_json()["transaction"]["amount"] == 200000
    assert r.get_json()["booking"]["payment_status"] == "Paid"

    r = staff.post(f"/bookings/{bid}/complete", json={})
    assert r.status_code == 200
    assert r.get_json()["booking"]["status"] == "Completed"
    assert staff.post(f"/bookings/{bid}/complete", json={}).status_code == 400

    ledger = staff.get("/finance/transactions", query_string={"booking_id": bid}).get_json()
    assert sorted(t["amount"] for t in ledger["transactions"]) == [100000, 200000]
    assert ledger["summary"]["income"] == 300000


def test_edit_adds_payment_delta(staff):
    b = _create(staff, amount_paid="100000")
    r = staff.post(f"/bookings/{b['id']}", json=booking_form(amount_paid="150000"))
    assert r.status_code == 200
    assert r.get_json()["transaction"]["amount"] == 50000
    assert r.get_json()["message"].startswith("Booking updated")


def test_cancel_then_rebook(staff):
    b = _create(staff)
    r = staff.post(f"/bookings/{b['id']}/cancel")
    assert r.get_json()["booking"]["status"] == "Cancelled"
    _create(staff, customer_name="Cici")
    cancelled = staff.get("/bookings", query_string={"status": "Cancelled"}).get_json()["bookings"]
    assert [x["id"] for x in cancelled] == [b["id"]]


def test_only_superadmin_deletes(staff):
    b = _create(staff)
    UserService.admin_create_user("staffer", "admin", "adminpw")
    staff.post("/logout")
    login(staff, "staffer", "adminpw")
    r = staff.post(f"/bookings/{b['id']}/delete")
    assert r.status_code == 403

    staff.post("/logout")
    login(staff)
    assert staff.post(f"/bookings/{b['id']}/delete").status_code == 200
    assert staff.get("/bookings").get_json()["bookings"] == []


def test_high_season_applies_to_new_bookings(staff):
    r = staff.post("/staff/high-seasons", json={"name": "Tahun Baru", "start_date": "2024-01-01",
                                               "end_date": "2024-01-01", "price_increase": "50000"})
    assert r.status_code == 201
    b = _create(staff)
    assert b["high_season_fee"] == 50000
    assert b["total_price"] == 350000


def test_dashboard_and_expenses(staff):
    _create(staff, amount_paid="300000")
    assert staff.get("/dashboard").status_code == 200

    r = staff.post("/finance/expenses", json={"category": "Setor Mitra", "amount": "200000"})
    tx_id = r.get_json()["id"]
    summary = staff.get("/finance/transactions").get_json()["summary"]
    assert summary["pending"] == 200000

    assert staff.post(f"/finance/transactions/{tx_id}/paid").status_code == 200
    summary = staff.get("/finance/transactions").get_json()["summary"]
    assert summary == {"income": 300000, "expense": 200000, "net": 100000, "pending": 0}


def test_packages_endpoint(staff):
    r = staff.get("/staff/packages").get_json()
    assert r["default"] == "12 Jam (Dalam Kota)"
    assert staff.post("/staff/packages", json={"packages": []}).status_code == 400
