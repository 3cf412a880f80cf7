"""
预订管理 API 测试
覆盖 /bookings 端点
"""
from datetime import date, timedelta
from decimal import Decimal
from fastapi.testclient import TestClient

from conftest import booking_payload


def _create(client, headers, **overrides):
    response = client.post("/bookings", json=booking_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateBooking:
    """创建预订"""

    def test_create_booking(self, client: TestClient, admin_auth_headers, lodge):
        data = _create(client, admin_auth_headers)
        assert data["status"] == "pending"
        assert data["nights"] == 3
        # 金额序列化为字符串
        assert Decimal(data["amount"]) == Decimal("345.00")
        assert data["lodge_name"] == "Victoria Falls Lodge"

    def test_validation_errors_are_422(self, client: TestClient, admin_auth_headers, lodge):
        response = client.post("/bookings", json=booking_payload(guest_email="bad", guests=5),
                               headers=admin_auth_headers)
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert {"guest_email", "guests"} <= set(detail["errors"])
        assert detail["message"]

    def test_conflict_is_422(self, client: TestClient, admin_auth_headers, lodge):
        _create(client, admin_auth_headers)
        response = client.post("/bookings", json=booking_payload(start_in=8), headers=admin_auth_headers)
        assert response.status_code == 422
        assert "room_conflict" in response.json()["detail"]["errors"]

    def test_receptionist_other_lodge_forbidden(self, client: TestClient, receptionist_auth_headers, lodge, other_lodge):
        response = client.post("/bookings", json=booking_payload(lodge_id="L2", room_id="R201"),
                               headers=receptionist_auth_headers)
        assert response.status_code == 403

    def test_cleaner_cannot_create(self, client: TestClient, cleaner_auth_headers, lodge):
        response = client.post("/bookings", json=booking_payload(), headers=cleaner_auth_headers)
        assert response.status_code == 403

    def test_requires_auth(self, client: TestClient, lodge):
        response = client.post("/bookings", json=booking_payload())
        assert response.status_code in (401, 403)


class TestListBookings:
    """预订列表"""

    def test_list_with_stats(self, client: TestClient, admin_auth_headers, lodge, other_lodge):
        _create(client, admin_auth_headers)
        _create(client, admin_auth_headers, lodge_id="L2", room_id="R201")

        response = client.get("/bookings", headers=admin_auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["pagination"]["total_items"] == 2
        assert data["stats"]["total_bookings"] == 2
        assert data["stats"]["pending_bookings"] == 2

    def test_list_scoped_for_receptionist(self, client: TestClient, admin_auth_headers,
                                          receptionist_auth_headers, lodge, other_lodge):
        _create(client, admin_auth_headers)
        _create(client, admin_auth_headers, lodge_id="L2", room_id="R201")

        data = client.get("/bookings", headers=receptionist_auth_headers).json()
        assert [b["lodge_id"] for b in data["bookings"]] == ["L1"]

    def test_filter_by_status(self, client: TestClient, admin_auth_headers, lodge):
        _create(client, admin_auth_headers)
        _create(client, admin_auth_headers, room_id="R102", status="confirmed")
        data = client.get("/bookings?status=confirmed", headers=admin_auth_headers).json()
        assert [b["status"] for b in data["bookings"]] == ["confirmed"]

    def test_get_other_lodge_booking_forbidden(self, client: TestClient, admin_auth_headers,
                                               receptionist_auth_headers, lodge, other_lodge):
        booking = _create(client, admin_auth_headers, lodge_id="L2", room_id="R201")
        response = client.get(f"/bookings/{booking['id']}", headers=receptionist_auth_headers)
        assert response.status_code == 403

    def test_get_missing_booking(self, client: TestClient, admin_auth_headers):
        assert client.get("/bookings/missing", headers=admin_auth_headers).status_code == 404

    def test_upcoming_and_today(self, client: TestClient, admin_auth_headers, lodge):
        _create(client, admin_auth_headers, start_in=1, status="confirmed")
        upcoming = client.get("/bookings/upcoming", headers=admin_auth_headers).json()
        assert len(upcoming) == 1
        today = client.get("/bookings/today", headers=admin_auth_headers).json()
        assert today == {"arrivals": [], "departures": []}

    def test_revenue(self, client: TestClient, admin_auth_headers, lodge):
        booking = _create(client, admin_auth_headers)
        start = date.today().isoformat()
        end = (date.today() + timedelta(days=30)).isoformat()
        data = client.get(f"/bookings/revenue?start={start}&end={end}", headers=admin_auth_headers).json()
        assert Decimal(data["revenue"]) == Decimal(booking["amount"])


class TestBookingActions:
    """状态变更、取消、收款"""

    def test_status_flow(self, client: TestClient, admin_auth_headers, receptionist_auth_headers, lodge):
        booking = _create(client, admin_auth_headers)
        url = f"/bookings/{booking['id']}/status"

        response = client.post(url, json={"status": "confirmed"}, headers=receptionist_auth_headers)
        assert response.status_code == 200
        assert response.json()["booking"]["status"] == "confirmed"
        assert response.json()["warnings"] == {}

        response = client.post(url, json={"status": "checked_out"}, headers=receptionist_auth_headers)
        assert response.status_code == 400

    def test_cancel(self, client: TestClient, admin_auth_headers, lodge):
        booking = _create(client, admin_auth_headers)
        response = client.post(f"/bookings/{booking['id']}/cancel", json={"reason": "Changed plans"},
                               headers=admin_auth_headers)
        assert response.status_code == 200
        assert response.json()["booking"]["status"] == "cancelled"

        again = client.post(f"/bookings/{booking['id']}/cancel", json={}, headers=admin_auth_headers)
        assert again.status_code == 400

    def test_late_cancel_warns(self, client: TestClient, admin_auth_headers, lodge):
        booking = _create(client, admin_auth_headers, start_in=0, status="confirmed")
        response = client.post(f"/bookings/{booking['id']}/cancel", json={}, headers=admin_auth_headers)
        assert response.status_code == 200
        assert "deadline" in response.json()["warnings"]

    def test_payment(self, client: TestClient, admin_auth_headers, lodge):
        booking = _create(client, admin_auth_headers)
        response = client.post(f"/bookings/{booking['id']}/payments",
                               json={"amount": "100", "method": "card"}, headers=admin_auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["payment_status"] == "partial"
        assert Decimal(data["balance"]) == Decimal("245.00")

    def test_update_booking(self, client: TestClient, admin_auth_headers, lodge):
        booking = _create(client, admin_auth_headers)
        response = client.put(f"/bookings/{booking['id']}", json={"guests": 3, "adults": 2, "children": 1},
                              headers=admin_auth_headers)
        assert response.status_code == 200
        assert response.json()["guests"] == 3

    def test_quote(self, client: TestClient, admin_auth_headers):
        response = client.post("/bookings/quote", json={
            "room_rate": "100", "check_in": "2025-01-01", "check_out": "2025-01-04",
            "discount_percent": "10", "extra_charges": "20", "tax_rate": "0.15",
        }, headers=admin_auth_headers)
        assert response.status_code == 200
        assert Decimal(response.json()["total"]) == Decimal("330.50")
