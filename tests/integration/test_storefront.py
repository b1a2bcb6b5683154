"""Integration tests for the public catalog, cart and checkout endpoints."""

from decimal import Decimal

import pytest
from tests.conftest import BUYER, login
from tests.factories import address_payload


async def _checkout(client, headers, payment_method="wallet", **address):
    return await client.post(
        "/store/checkout",
        json={
            "shipping_address": address_payload(**address),
            "payment_method": payment_method,
        },
        headers=headers,
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_products_and_categories(client):
    response = await client.get("/store/products", params={"category": "Vegetables"})
    assert response.status_code == 200
    names = {p["name"] for p in response.json()}
    assert "Fresh Carrots" in names and "Organic Apples" not in names

    categories = await client.get("/store/categories")
    assert [c["name"] for c in categories.json()] == ["Fruits", "Vegetables", "Grains", "Others"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_unknown_product(client):
    response = await client.get("/store/products/missing")

    assert response.status_code == 404
    assert response.json()["code"] == "PRODUCT_NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_farmer_storefront(client):
    farmers = await client.get("/store/farmers")
    assert [f["id"] for f in farmers.json()] == ["u2"]

    products = await client.get("/store/farmers/u2/products")
    assert len(products.json()) == 11

    missing = await client.get("/store/farmers/u1")
    assert missing.status_code == 404


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cart_requires_session(client):
    response = await client.get("/store/cart")

    assert response.status_code == 401
    assert response.json()["code"] == "NOT_AUTHENTICATED"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cart_operations(client, buyer_headers):
    added = await client.post(
        "/store/cart/items", json={"product_id": "p1", "quantity": 2}, headers=buyer_headers
    )
    assert added.status_code == 200, added.text
    assert added.json()["count"] == 2
    assert Decimal(added.json()["subtotal"]) == Decimal("5.98")

    updated = await client.patch(
        "/store/cart/items/p1", json={"quantity": 4}, headers=buyer_headers
    )
    assert updated.json()["items"][0]["quantity"] == 4

    removed = await client.delete("/store/cart/items/p1", headers=buyer_headers)
    assert removed.json()["items"] == []

    again = await client.delete("/store/cart/items/p1", headers=buyer_headers)
    assert again.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_add_over_stock_reports_available(client, buyer_headers):
    response = await client.post(
        "/store/cart/items", json={"product_id": "p5", "quantity": 6}, headers=buyer_headers
    )

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "INSUFFICIENT_STOCK"
    assert body["params"]["available"] == 5
    assert body["detail"] == "Only 5 kg available."


@pytest.mark.asyncio
@pytest.mark.integration
async def test_buy_now_replaces_cart(client, buyer_headers):
    await client.post(
        "/store/cart/items", json={"product_id": "p1", "quantity": 2}, headers=buyer_headers
    )

    response = await client.post(
        "/store/cart/buy-now", json={"product_id": "p3", "quantity": 1}, headers=buyer_headers
    )

    items = response.json()["items"]
    assert [(i["product"]["id"], i["quantity"]) for i in items] == [("p3", 1)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_shipping_quote(client, buyer_headers):
    await client.post(
        "/store/cart/items", json={"product_id": "p1", "quantity": 1}, headers=buyer_headers
    )

    response = await client.post(
        "/store/cart/shipping-quote",
        json={"address": address_payload(city="Mysuru")},
        headers=buyer_headers,
    )

    data = response.json()
    assert Decimal(data["shipping_fee"]) == Decimal("0.36")
    assert Decimal(data["total"]) == Decimal("3.35")
    assert data["currency"] == "USD"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_sessions_keep_separate_carts(client, buyer_headers):
    other_headers = await login(client, *BUYER)
    await client.post(
        "/store/cart/items", json={"product_id": "p1", "quantity": 1}, headers=buyer_headers
    )

    other_cart = await client.get("/store/cart", headers=other_headers)

    assert other_cart.json()["items"] == []


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_without_session_or_cart(client, buyer_headers):
    anonymous = await _checkout(client, {})
    assert anonymous.status_code == 400
    assert anonymous.json()["code"] == "EMPTY_CART_OR_NO_SESSION"

    empty = await _checkout(client, buyer_headers)
    assert empty.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_with_wallet(client, buyer_headers):
    await client.post(
        "/store/cart/items", json={"product_id": "p1", "quantity": 2}, headers=buyer_headers
    )

    response = await _checkout(client, buyer_headers)

    assert response.status_code == 201, response.text
    order = response.json()
    assert order["status"] == "Confirmed"
    assert Decimal(order["total"]) == Decimal("6.94")

    me = await client.get("/me", headers=buyer_headers)
    assert Decimal(me.json()["wallet_balance"]) == Decimal("93.06")

    cart = await client.get("/store/cart", headers=buyer_headers)
    assert cart.json()["count"] == 0

    history = await client.get("/store/orders", headers=buyer_headers)
    assert [o["id"] for o in history.json()][:2] == [order["id"], "ord1"]

    product = await client.get("/store/products/p1")
    assert product.json()["stock"] == 8


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_validation_errors(client, buyer_headers):
    await client.post(
        "/store/cart/items", json={"product_id": "p1", "quantity": 1}, headers=buyer_headers
    )

    bad_phone = await _checkout(client, buyer_headers, phone="123")
    assert bad_phone.status_code == 422
    assert bad_phone.json()["params"]["field"] == "phone"

    bad_method = await _checkout(client, buyer_headers, payment_method="barter")
    assert bad_method.status_code == 422
    assert bad_method.json()["params"]["field"] == "payment_method"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_insufficient_wallet(client, buyer_headers):
    await client.post(
        "/store/cart/items", json={"product_id": "p11", "quantity": 17}, headers=buyer_headers
    )

    response = await _checkout(client, buyer_headers)

    assert response.status_code == 402
    assert response.json()["code"] == "INSUFFICIENT_WALLET_BALANCE"
    cart = await client.get("/store/cart", headers=buyer_headers)
    assert cart.json()["count"] == 17


@pytest.mark.asyncio
@pytest.mark.integration
async def test_order_visible_only_to_parties(client, buyer_headers, farmer_headers):
    as_buyer = await client.get("/store/orders/ord1", headers=buyer_headers)
    assert as_buyer.status_code == 200

    as_farmer = await client.get("/store/orders/ord1", headers=farmer_headers)
    assert as_farmer.status_code == 200

    owner_headers = await login(client, "owner@example.com", "password123")
    as_owner = await client.get("/store/orders/ord1", headers=owner_headers)
    assert as_owner.status_code == 200

    stranger = await client.post(
        "/auth/register",
        json={
            "full_name": "Stranger",
            "email": "stranger@example.com",
            "mobile": "9876543210",
            "password": "secret123",
        },
    )
    headers = {"Authorization": f"Bearer {stranger.json()['access_token']}"}
    as_stranger = await client.get("/store/orders/ord1", headers=headers)
    assert as_stranger.status_code == 404
