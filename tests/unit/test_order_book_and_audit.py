"""Unit tests for the order book and the audit trail."""

import pytest
from pydantic import ValidationError
from services.market_service.errors import InvalidStatusTransition, OrderNotFound
from services.market_service.models import AuditAction, OrderStatus
from services.market_service.services.audit_trail import AuditTrail
from tests.factories import AccountFactory, AddressFactory

# ---------------------------------------------------------------------------
# Order book
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_seed_order_views(market):
    assert [o.id for o in market.orders.for_buyer("u1")] == ["ord1"]
    assert [o.id for o in market.orders.for_seller("u2")] == ["ord1"]
    assert market.orders.for_buyer("u2") == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_get_unknown_order(market):
    with pytest.raises(OrderNotFound):
        market.orders.get("missing")
    with pytest.raises(OrderNotFound):
        await market.orders.advance_status("missing", OrderStatus.DELIVERED)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_status_only_moves_forward(market, buyer_session):
    market.carts.add_to_cart(buyer_session, "p1", 1)
    order = await market.placement.place_order(buyer_session, AddressFactory.create(), "cod")

    delivered = await market.orders.advance_status(order.id, OrderStatus.DELIVERED)
    assert delivered.status == OrderStatus.DELIVERED

    with pytest.raises(InvalidStatusTransition):
        await market.orders.advance_status(order.id, OrderStatus.CONFIRMED)
    with pytest.raises(InvalidStatusTransition):
        await market.orders.advance_status(order.id, OrderStatus.DELIVERED)
    assert market.orders.get(order.id).status == OrderStatus.DELIVERED


# ---------------------------------------------------------------------------
# Audit trail
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_audit_entries_newest_first():
    audit = AuditTrail()
    actor = AccountFactory.create(full_name="Auditor")

    await audit.record(actor, AuditAction.PRODUCT_ADDED, "first")
    await audit.record(actor, AuditAction.PRODUCT_DELETED, "second")

    entries = audit.entries()
    assert [e.details for e in entries] == ["second", "first"]
    assert entries[0].actor_name == "Auditor"
    assert entries[0].action == "Product Deleted"
    assert [e.details for e in audit.entries(1)] == ["second"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_audit_without_actor_is_attributed_to_system():
    audit = AuditTrail()

    entry = await audit.record(None, "Custom Action", "nightly job")

    assert (entry.actor_id, entry.actor_name, entry.action) == (
        "system",
        "System",
        "Custom Action",
    )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_audit_entries_are_frozen():
    audit = AuditTrail()
    entry = await audit.record(None, AuditAction.USER_LOGIN, "x")

    with pytest.raises(ValidationError):
        entry.details = "rewritten"
