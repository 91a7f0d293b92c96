from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.api import create_app
from app.api.deps import get_lock_service, get_notification_service
from app.data.database import get_db
from app.domain.order_status import OrderStatus

ADMIN = {"X-User-Id": "999", "X-User-Role": "ADMIN"}


def as_user(user):
    return {"X-User-Id": str(user.id)}


@pytest.fixture
def client(db, lock, notifications):
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock
    app.dependency_overrides[get_notification_service] = lambda: notifications

    with TestClient(app) as c:
        yield c


@pytest.fixture
def placed_order(client, user, address, variant):
    client.post("/cart/items", json={"variant_id": variant.id, "quantity": 2}, headers=as_user(user))
    resp = client.post("/orders", json={"address_id": address.id}, headers=as_user(user))
    assert resp.status_code == 201
    return resp.json()


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"

    assert client.get("/health").headers["X-Request-ID"]


@pytest.mark.parametrize(
    "headers",
    [{}, {"X-User-Id": "abc"}, {"X-User-Id": "0"}, {"X-User-Id": "1", "X-User-Role": "ROOT"}],
)
def test_authentication_required(client, headers):
    assert client.get("/cart", headers=headers).status_code == 401


def test_cart_flow(client, user, variant):
    headers = as_user(user)

    empty = client.get("/cart", headers=headers)
    assert empty.status_code == 200
    assert empty.json()["items"] == []

    added = client.post("/cart/items", json={"variant_id": variant.id, "quantity": 2}, headers=headers)
    assert added.status_code == 200
    item = added.json()["items"][0]
    assert Decimal(item["unit_price"]) == Decimal("50000")

    updated = client.patch(f"/cart/items/{item['id']}", json={"quantity": 3}, headers=headers)
    assert updated.json()["items"][0]["quantity"] == 3

    summary = client.get("/cart/summary", headers=headers).json()
    assert summary["item_count"] == 3
    assert Decimal(summary["subtotal"]) == Decimal("150000")

    removed = client.delete(f"/cart/items/{item['id']}", headers=headers)
    assert removed.json()["items"] == []

    client.post("/cart/items", json={"variant_id": variant.id, "quantity": 1}, headers=headers)
    assert client.delete("/cart", headers=headers).json()["items"] == []


def test_add_beyond_stock_is_409(client, user, make_variant):
    v = make_variant(stock=1)

    resp = client.post("/cart/items", json={"variant_id": v.id, "quantity": 2}, headers=as_user(user))

    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "INSUFFICIENT_STOCK"
    assert resp.json()["detail"]["available"] == 1


def test_invalid_body_is_422(client, user, variant):
    resp = client.post("/cart/items", json={"variant_id": variant.id, "quantity": 0}, headers=as_user(user))

    assert resp.status_code == 422


def test_unknown_cart_item_is_404(client, user):
    resp = client.patch("/cart/items/777", json={"quantity": 1}, headers=as_user(user))

    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "NOT_FOUND"


def test_checkout(placed_order, notifications):
    assert placed_order["status"] == "PENDING"
    assert placed_order["order_number"] == 1000 + placed_order["id"]
    assert Decimal(placed_order["total"]) == Decimal("134000")
    assert Decimal(placed_order["shipping_cost"]) == Decimal("15000")
    assert placed_order["shipping_address_snapshot"]["city"] == "Bogota"
    assert placed_order["items"][0]["quantity"] == 2
    assert ("confirmed", placed_order["id"]) in notifications.calls


def test_checkout_empty_cart_is_400(client, user, address):
    resp = client.post("/orders", json={"address_id": address.id}, headers=as_user(user))

    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "EMPTY_CART"


def test_checkout_foreign_address_is_404(client, user, other_address, variant):
    client.post("/cart/items", json={"variant_id": variant.id, "quantity": 1}, headers=as_user(user))

    resp = client.post("/orders", json={"address_id": other_address.id}, headers=as_user(user))

    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "ADDRESS_NOT_FOUND"


def test_checkout_in_progress_is_409(client, lock, user, address, variant):
    client.post("/cart/items", json={"variant_id": variant.id, "quantity": 1}, headers=as_user(user))
    lock.acquire = False

    resp = client.post("/orders", json={"address_id": address.id}, headers=as_user(user))

    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "CONFLICT"


def test_order_visibility(client, placed_order, user, other_user):
    order_id = placed_order["id"]

    assert client.get(f"/orders/{order_id}", headers=as_user(user)).status_code == 200
    assert client.get(f"/orders/{order_id}", headers=ADMIN).status_code == 200
    forbidden = client.get(f"/orders/{order_id}", headers=as_user(other_user))
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"]["code"] == "FORBIDDEN"
    assert client.get("/orders/4242", headers=as_user(user)).status_code == 404


def test_list_orders(client, placed_order, user, other_user):
    mine = client.get("/orders", headers=as_user(user)).json()
    assert [o["id"] for o in mine] == [placed_order["id"]]

    # filtr user_id ignorowany dla zwyklego uzytkownika
    theirs = client.get("/orders", params={"user_id": user.id}, headers=as_user(other_user)).json()
    assert theirs == []

    everyone = client.get("/orders", params={"status": "PENDING"}, headers=ADMIN).json()
    assert [o["id"] for o in everyone] == [placed_order["id"]]
    assert client.get("/orders", params={"status": "PAID"}, headers=ADMIN).json() == []


def test_status_update_requires_admin(client, placed_order, user):
    resp = client.patch(
        f"/orders/{placed_order['id']}/status", json={"status": "PAID"}, headers=as_user(user)
    )

    assert resp.status_code == 403


def test_illegal_transition_is_409(client, placed_order):
    resp = client.patch(f"/orders/{placed_order['id']}/status", json={"status": "SHIPPED"}, headers=ADMIN)

    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["code"] == "ILLEGAL_TRANSITION"
    assert (detail["from"], detail["to"]) == ("PENDING", "SHIPPED")


def test_unknown_status_is_422(client, placed_order):
    resp = client.patch(f"/orders/{placed_order['id']}/status", json={"status": "LOST"}, headers=ADMIN)

    assert resp.status_code == 422


def test_cancel_order(client, placed_order, user, variant, stock_of):
    assert stock_of(variant.id) == 8

    resp = client.delete(f"/orders/{placed_order['id']}", headers=as_user(user))

    assert resp.status_code == 200
    assert resp.json()["status"] == OrderStatus.CANCELLED.value
    assert stock_of(variant.id) == 10

    again = client.delete(f"/orders/{placed_order['id']}", headers=as_user(user))
    assert again.status_code == 409
    assert again.json()["detail"]["code"] == "ORDER_NOT_PENDING"


def test_payment_flow(client, placed_order, user):
    order_id = placed_order["id"]

    methods = client.get("/payments/methods", headers=as_user(user)).json()
    assert "CREDIT_CARD" in {m["id"] for m in methods}

    created = client.post(f"/payments/orders/{order_id}", json={"provider": "CREDIT_CARD"}, headers=as_user(user))
    assert created.status_code == 201
    assert created.json()["status"] == "PENDING"

    duplicate = client.post(f"/payments/orders/{order_id}", json={"provider": "PSE"}, headers=as_user(user))
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"]["code"] == "DUPLICATE_PAYMENT"

    processed = client.post(f"/payments/orders/{order_id}/process", json={"success": True}, headers=as_user(user))
    assert processed.status_code == 200
    assert processed.json()["status"] == "APPROVED"

    assert client.get(f"/orders/{order_id}", headers=as_user(user)).json()["status"] == "PAID"
    assert client.get(f"/payments/orders/{order_id}", headers=ADMIN).json()["status"] == "APPROVED"


def test_unsupported_provider_is_400(client, placed_order, user):
    resp = client.post(
        f"/payments/orders/{placed_order['id']}", json={"provider": "BITCOIN"}, headers=as_user(user)
    )

    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "UNSUPPORTED_PROVIDER"
