"""
End-to-end service cycle over HTTP: seat, order, cook, deliver, pay.
"""

from decimal import Decimal

import pytest

from conftest import login
from modules.staff.enums.staff_enums import StaffRole


@pytest.fixture
def table_id(client, manager_headers):
    response = client.post("/api/tables", json={"number": 12, "seats": 4}, headers=manager_headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def add_to_cart(client, headers, cart, menu_item_id, quantity=1, notes=None):
    response = client.post(
        "/api/cart/items",
        json={
            "cart": cart,
            "item": {"menu_item_id": menu_item_id, "quantity": quantity, "notes": notes},
        },
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


def send_order(client, headers, table_id, *lines):
    cart = {"lines": []}
    for menu_item_id, quantity in lines:
        cart = add_to_cart(client, headers, cart, menu_item_id, quantity)
    payload = [
        {"menu_item_id": line["menu_item_id"], "quantity": line["quantity"], "notes": line["notes"]}
        for line in cart["lines"]
    ]
    response = client.post(f"/api/tables/{table_id}/orders", json={"lines": payload}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["orders"][-1]["id"]


def set_status(client, headers, table_id, order_id, status):
    return client.patch(
        f"/api/tables/{table_id}/orders/{order_id}/status",
        json={"status": status},
        headers=headers,
    )


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestAuthentication:

    def test_all_roles_can_log_in(self, client, waiter_headers):
        for username, password, role in [
            ("admin", "admin123", StaffRole.MANAGER),
            ("kitchen", "kitchen123", StaffRole.KITCHEN),
            ("mary", "waiter123", StaffRole.WAITER),
        ]:
            headers = login(client, username, password, role)
            me = client.get("/api/auth/me", headers=headers).json()
            assert me["username"] == username
            assert me["role"] == role.value

    def test_bad_login_has_uniform_error(self, client):
        response = client.post(
            "/api/auth/login",
            json={"username": "admin", "password": "admin123", "role": "waiter"},
        )

        assert response.status_code == 401
        body = response.json()
        assert body["detail"] == "Invalid credentials"
        assert body["error_code"] == "AUTH_FAILED"
        assert body["path"] == "/api/auth/login"
        assert body["context"] == {}

    def test_requests_without_token_are_rejected(self, client):
        assert client.get("/api/tables").status_code == 401

    def test_waiter_cannot_manage_staff(self, client, waiter_headers):
        assert client.get("/api/staff/users", headers=waiter_headers).status_code == 403


def test_full_service_cycle(client, table_id, manager_headers, waiter_headers, kitchen_headers):
    started = client.post(f"/api/tables/{table_id}/start", headers=waiter_headers)
    assert started.status_code == 200, started.text
    assert started.json()["status"] == "occupied"
    assert started.json()["waiter_id"] == "mary"

    order_id = send_order(client, waiter_headers, table_id, ("burger", 2), ("soda", 1))

    queue = client.get("/api/kitchen/queue", headers=kitchen_headers).json()
    assert [t["order"]["id"] for t in queue["active"]] == [order_id]
    assert queue["active"][0]["table_number"] == 12

    # Waiters cannot cook
    assert set_status(client, waiter_headers, table_id, order_id, "preparing").status_code == 403

    ticket = client.put(
        f"/api/kitchen/tables/{table_id}/orders/{order_id}/status",
        json={"status": "preparing"},
        headers=kitchen_headers,
    )
    assert ticket.status_code == 200, ticket.text
    assert ticket.json()["order"]["status"] == "preparing"

    assert set_status(client, kitchen_headers, table_id, order_id, "done").status_code == 200
    queue = client.get("/api/kitchen/queue", headers=kitchen_headers).json()
    assert queue["active"] == []
    assert [t["order"]["id"] for t in queue["awaiting_delivery"]] == [order_id]

    # The kitchen does not deliver
    assert set_status(client, kitchen_headers, table_id, order_id, "delivered").status_code == 403
    delivered = set_status(client, waiter_headers, table_id, order_id, "delivered")
    assert delivered.status_code == 200
    assert delivered.json()["orders"][0]["status"] == "delivered"

    bill = client.get(
        f"/api/tables/{table_id}/bill", params={"tip_percentage": "10"}, headers=waiter_headers
    ).json()
    assert Decimal(bill["subtotal"]) == Decimal("68.00")
    assert Decimal(bill["total"]) == Decimal("74.80")
    assert bill["warnings"] == []

    preview = client.post(
        f"/api/tables/{table_id}/bill/preview",
        json={"method": "equal", "people": 3, "tip_percentage": "10"},
        headers=waiter_headers,
    )
    assert preview.status_code == 200, preview.text
    assert [Decimal(s["amount"]) for s in preview.json()["shares"]] == [
        Decimal("24.94"),
        Decimal("24.93"),
        Decimal("24.93"),
    ]

    receipt = client.post(
        f"/api/tables/{table_id}/payment",
        json={"method": "full", "tip_percentage": "10", "payment_method": "cash"},
        headers=waiter_headers,
    )
    assert receipt.status_code == 200, receipt.text
    assert Decimal(receipt.json()["split"]["total_assigned"]) == Decimal("74.80")
    assert receipt.json()["forced"] is False

    table = client.get(f"/api/tables/{table_id}", headers=waiter_headers).json()
    assert table["status"] == "available"
    assert table["orders"] == []
    assert table["waiter_id"] is None

    summary = client.get("/api/dashboard/summary", headers=manager_headers).json()
    assert summary["total_orders"] == 0


class TestConflicts:

    def test_close_with_order_in_kitchen_is_rejected(
        self, client, table_id, waiter_headers, kitchen_headers
    ):
        client.post(f"/api/tables/{table_id}/start", headers=waiter_headers)
        order_id = send_order(client, waiter_headers, table_id, ("steak", 1))
        set_status(client, kitchen_headers, table_id, order_id, "preparing")

        response = client.post(f"/api/tables/{table_id}/close", headers=waiter_headers)

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATE"
        assert response.json()["context"]["undelivered_orders"] == [order_id]

        forced = client.post(
            f"/api/tables/{table_id}/close", json={"force": True}, headers=waiter_headers
        )
        assert forced.status_code == 200
        assert forced.json()["status"] == "available"

    def test_skipping_a_stage_is_rejected(self, client, table_id, waiter_headers, kitchen_headers):
        client.post(f"/api/tables/{table_id}/start", headers=waiter_headers)
        order_id = send_order(client, waiter_headers, table_id, ("soda", 2))

        response = set_status(client, kitchen_headers, table_id, order_id, "done")

        assert response.status_code == 409

    def test_empty_cart_cannot_be_sent(self, client, table_id, waiter_headers):
        client.post(f"/api/tables/{table_id}/start", headers=waiter_headers)
        response = client.post(
            f"/api/tables/{table_id}/orders", json={"lines": []}, headers=waiter_headers
        )
        assert response.status_code == 400

    def test_duplicate_table_number(self, client, table_id, manager_headers):
        response = client.post("/api/tables", json={"number": 12, "seats": 2}, headers=manager_headers)
        assert response.status_code == 409

    def test_category_in_use_cannot_be_deleted(self, client, manager_headers):
        response = client.delete("/api/menu/categories/Beverages", headers=manager_headers)

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    def test_unavailable_item_cannot_be_added(self, client, manager_headers, waiter_headers):
        client.post("/api/menu/items/soda/toggle-availability", headers=manager_headers)

        response = client.post(
            "/api/cart/items",
            json={"item": {"menu_item_id": "soda"}},
            headers=waiter_headers,
        )

        assert response.status_code == 400


class TestOrderLinesComeFromTheMenu:

    def post_lines(self, client, headers, table_id, *lines):
        return client.post(
            f"/api/tables/{table_id}/orders", json={"lines": list(lines)}, headers=headers
        )

    def test_client_price_and_name_are_ignored(self, client, table_id, waiter_headers):
        response = self.post_lines(
            client, waiter_headers, table_id,
            {"menu_item_id": "steak", "quantity": 3, "price": "0.00", "name": "Free steak"},
        )

        assert response.status_code == 201, response.text
        item = response.json()["orders"][0]["items"][0]
        assert Decimal(item["price"]) == Decimal("89.90")
        assert item["name"] == "Grilled Steak"
        assert item["category"] == "Main Courses"
        assert item["quantity"] == 3

    def test_unknown_item_is_rejected(self, client, table_id, waiter_headers):
        response = self.post_lines(
            client, waiter_headers, table_id,
            {"menu_item_id": "steak", "quantity": 1},
            {"menu_item_id": "does-not-exist", "quantity": 1},
        )

        assert response.status_code == 404
        table = client.get(f"/api/tables/{table_id}", headers=waiter_headers).json()
        assert table["orders"] == []

    def test_unavailable_item_is_rejected(self, client, table_id, manager_headers, waiter_headers):
        client.post("/api/menu/items/soda/toggle-availability", headers=manager_headers)

        response = self.post_lines(
            client, waiter_headers, table_id, {"menu_item_id": "soda", "quantity": 1}
        )

        assert response.status_code == 400
