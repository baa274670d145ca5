"""Order placement and listing through the HTTP API."""

from datetime import datetime, timedelta, timezone

from sqlmodel import select

from marketplace.core.config import get_settings
from marketplace.models.cart import Cart, CartItem
from marketplace.models.order import Order
from marketplace.models.product import Product
from marketplace.models.seller import Seller
from tests.factories import auth_headers, make_cart, make_product, make_seller


def _place(client, user_id="u1", headers=None, **body):
    return client.post(
        f"/api/users/{user_id}/orders",
        json=body,
        headers=auth_headers(user_id) if headers is None else headers,
    )


def _reload(session, model, key):
    obj = session.get(model, key)
    session.refresh(obj)
    return obj


class TestPlaceOrder:
    def test_creates_order_with_defaults(self, client, session):
        make_product(session, "p1", stock=5)

        response = _place(client, items=[{"productId": "p1", "quantity": 2, "price": 10}], total=20)

        assert response.status_code == 201
        order = response.json()
        assert order["id"].startswith("o")
        assert order["customerId"] == "u1"
        assert order["customerName"] == "Unknown"
        assert order["status"] == "Pending"
        assert order["total"] == 20
        assert order["shippingAddress"] == ""
        assert order["paymentMethod"] == "Cash on Delivery"
        assert order["items"][0]["productName"] == "Product p1"
        assert order["items"][0]["itemStatus"] == "Pending"
        assert _reload(session, Product, "p1").stock == 3

    def test_keeps_submitted_fields(self, client, session):
        make_product(session, "p1")

        order = _place(
            client,
            items=[{"productId": "p1", "productName": "Honey jar", "quantity": 1, "price": 7.5}],
            total=7.5,
            customerName="Ana",
            shippingAddress="1 Main St",
            date="2026-03-01T10:00:00",
        ).json()

        assert order["customerName"] == "Ana"
        assert order["shippingAddress"] == "1 Main St"
        assert order["date"].startswith("2026-03-01T10:00:00")
        assert order["items"][0]["productName"] == "Honey jar"

    def test_date_without_offset_is_read_as_utc(self, client, session):
        make_product(session, "p1")

        response = _place(
            client,
            items=[{"productId": "p1", "quantity": 1, "price": 5}],
            date="2026-03-01T10:00:00",
        )

        assert response.status_code == 201
        stored = session.get(Order, response.json()["id"])
        assert stored.date.replace(tzinfo=None) == datetime(2026, 3, 1, 10, 0, 0)

    def test_total_defaults_to_line_sum(self, client, session):
        make_product(session, "p1")
        make_product(session, "p2")

        order = _place(
            client,
            items=[
                {"productId": "p1", "quantity": 2, "price": 10},
                {"productId": "p2", "quantity": 1, "price": 4.5},
            ],
        ).json()

        assert order["total"] == 24.5

    def test_overselling_clamps_stock_to_zero(self, client, session):
        make_product(session, "p1", stock=3)

        order = _place(client, items=[{"productId": "p1", "quantity": 5, "price": 10}], total=50).json()

        assert order["total"] == 50
        assert order["items"][0]["quantity"] == 5
        assert _reload(session, Product, "p1").stock == 0

    def test_deleted_product_is_kept_on_order_and_skipped(self, client, session):
        make_product(session, "p1", stock=4)

        response = _place(
            client,
            items=[
                {"productId": "gone", "productName": "Old jam", "quantity": 1, "price": 3},
                {"productId": "p1", "quantity": 1, "price": 10},
            ],
            total=13,
        )

        assert response.status_code == 201
        items = response.json()["items"]
        assert [it["productId"] for it in items] == ["gone", "p1"]
        assert items[0]["sellerId"] is None
        assert session.get(Product, "gone") is None
        assert _reload(session, Product, "p1").stock == 3

    def test_seller_revenue_accumulated_per_seller(self, client, session):
        make_seller(session, "sA", total_sales=100.0)
        make_seller(session, "sB")
        make_product(session, "a1", seller_id="sA")
        make_product(session, "b1", seller_id="sB")
        make_product(session, "a2", seller_id="sA")

        _place(
            client,
            items=[
                {"productId": "a1", "quantity": 2, "price": 5},
                {"productId": "b1", "quantity": 1, "price": 8},
                {"productId": "a2", "quantity": 3, "price": 1},
            ],
        )

        assert _reload(session, Seller, "sA").total_sales == 113.0
        assert _reload(session, Seller, "sB").total_sales == 8.0

    def test_missing_seller_is_skipped(self, client, session):
        make_product(session, "p1", seller_id="nobody", stock=2)

        response = _place(client, items=[{"productId": "p1", "quantity": 1, "price": 5}])

        assert response.status_code == 201
        assert response.json()["items"][0]["sellerId"] == "nobody"
        assert _reload(session, Product, "p1").stock == 1

    def test_lines_without_quantity_are_not_applied(self, client, session):
        make_product(session, "p1", stock=2)

        _place(client, items=[{"productId": "p1", "price": 5}, {"quantity": 1, "price": 2}])

        assert _reload(session, Product, "p1").stock == 2

    def test_cart_is_deleted(self, client, session):
        make_product(session, "p1")
        make_cart(session, "u1", "p1")

        _place(client, items=[{"productId": "p1", "quantity": 1, "price": 10}])

        assert session.get(Cart, "u1") is None
        assert session.exec(select(CartItem)).all() == []
        cart = client.get("/api/users/u1/cart", headers=auth_headers("u1")).json()
        assert cart["items"] == []

    def test_empty_items_rejected(self, client, session):
        make_cart(session, "u1", "p1")

        response = _place(client, items=[], total=0)

        assert response.status_code == 400
        assert session.exec(select(Order)).all() == []
        assert session.get(Cart, "u1") is not None

    def test_missing_items_rejected(self, client, session):
        response = _place(client, total=0)

        assert response.status_code == 400
        assert session.exec(select(Order)).all() == []


class TestPlaceOrderStrictMode:
    def test_missing_product_aborts_without_writes(self, client, session, monkeypatch):
        monkeypatch.setattr(get_settings(), "CHECKOUT_MODE", "strict")
        make_product(session, "p1", stock=4)
        make_cart(session, "u1", "p1")

        response = _place(
            client,
            items=[
                {"productId": "p1", "quantity": 1, "price": 10},
                {"productId": "gone", "quantity": 1, "price": 3},
            ],
        )

        assert response.status_code == 409
        assert response.json()["detail"]["items"][0]["productId"] == "gone"
        assert session.exec(select(Order)).all() == []
        assert _reload(session, Product, "p1").stock == 4
        assert session.get(Cart, "u1") is not None

    def test_happy_path(self, client, session, monkeypatch):
        monkeypatch.setattr(get_settings(), "CHECKOUT_MODE", "strict")
        make_seller(session, "s1")
        make_product(session, "p1", seller_id="s1", stock=1)

        response = _place(client, items=[{"productId": "p1", "quantity": 3, "price": 2}])

        assert response.status_code == 201
        assert _reload(session, Product, "p1").stock == 0
        assert _reload(session, Seller, "s1").total_sales == 6.0


class TestPlaceOrderAuth:
    def test_requires_token(self, client):
        response = _place(client, headers={}, items=[{"productId": "p1", "quantity": 1, "price": 1}])

        assert response.status_code == 401

    def test_rejects_other_users_token(self, client, session):
        response = _place(
            client,
            headers=auth_headers("u2"),
            items=[{"productId": "p1", "quantity": 1, "price": 1}],
        )

        assert response.status_code == 403
        assert session.exec(select(Order)).all() == []

    def test_rejects_bad_token(self, client):
        response = _place(
            client,
            headers={"Authorization": "Bearer not-a-jwt"},
            items=[{"productId": "p1", "quantity": 1, "price": 1}],
        )

        assert response.status_code == 401


class TestListOrders:
    def test_legacy_route_lists_customer_orders(self, client, session):
        make_product(session, "p1")
        _place(client, "u1", items=[{"productId": "p1", "quantity": 1, "price": 10}], total=10)
        _place(client, "u2", items=[{"productId": "p1", "quantity": 1, "price": 10}], total=10)

        response = client.get("/api/orders/user/u1")

        assert response.status_code == 200
        orders = response.json()
        assert len(orders) == 1
        assert orders[0]["customerId"] == "u1"
        assert orders[0]["items"][0]["productId"] == "p1"

    def test_legacy_route_empty(self, client):
        response = client.get("/api/orders/user/nobody")

        assert response.status_code == 200
        assert response.json() == []

    def test_own_orders_newest_first(self, client, session):
        make_product(session, "p1")
        _place(client, items=[{"productId": "p1", "quantity": 1, "price": 1}], date="2026-01-01T00:00:00")
        _place(client, items=[{"productId": "p1", "quantity": 1, "price": 2}], date="2026-02-01T00:00:00")

        orders = client.get("/api/users/u1/orders", headers=auth_headers("u1")).json()

        assert [o["total"] for o in orders] == [2, 1]

    def test_own_orders_forbidden_for_others(self, client):
        response = client.get("/api/users/u1/orders", headers=auth_headers("u2"))

        assert response.status_code == 403

    def test_legacy_route_returns_full_history(self, client, session):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        session.add_all(
            [
                Order(id=f"o{n:03d}", customer_id="u1", total=n, date=base + timedelta(hours=n))
                for n in range(105)
            ]
        )
        session.commit()

        orders = client.get("/api/orders/user/u1").json()

        assert len(orders) == 105
        assert orders[0]["id"] == "o104"
        assert orders[-1]["id"] == "o000"

    def test_own_orders_are_paged(self, client, session):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        session.add_all(
            [
                Order(id=f"o{n:03d}", customer_id="u1", total=n, date=base + timedelta(hours=n))
                for n in range(105)
            ]
        )
        session.commit()

        orders = client.get("/api/users/u1/orders", headers=auth_headers("u1")).json()

        assert len(orders) == 100
