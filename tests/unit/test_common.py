"""Unit tests for shared helpers: currency, messages, notifications, tokens."""

from datetime import timedelta
from decimal import Decimal

import pytest
from libs.auth.tokens import InvalidToken, decode_session_token, issue_session_token
from libs.common.currency import format_price, inr_to_reference, quantize_money
from libs.common.messages import t
from services.market_service.errors import InsufficientStock, PersistenceError
from services.market_service.models import NotificationSeverity
from services.market_service.services.notifications import NotificationCenter, Notifier

# ---------------------------------------------------------------------------
# Currency
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    "inr, expected",
    [("30", "0.36"), ("50", "0.60"), ("80", "0.96"), ("120", "1.44")],
)
def test_inr_to_reference_rounds_to_cents(inr, expected):
    assert inr_to_reference(Decimal(inr)) == Decimal(expected)


@pytest.mark.unit
def test_quantize_money_rounds_half_up():
    assert quantize_money(Decimal("0.125")) == Decimal("0.13")
    assert quantize_money(Decimal("0.124")) == Decimal("0.12")


@pytest.mark.unit
def test_format_price():
    assert format_price(Decimal("1")) == "$1.00"
    assert format_price(Decimal("1"), "INR") == "₹83.50"
    assert format_price(Decimal("1"), "XYZ") == "$1.00"


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_translation_lookup():
    assert t("cart.added", product_name="Apples") == "Apples added to cart"
    assert t("no.such.key") == "no.such.key"
    assert t("cart.added", locale="xx", product_name="Apples") == "Apples added to cart"


@pytest.mark.unit
def test_error_renders_its_message_key():
    error = InsufficientStock(available=3, product_id="p1", product_name="Apples", unit="kg")

    body = error.to_dict()
    assert body["detail"] == "Only 3 kg available."
    assert body["code"] == "INSUFFICIENT_STOCK"
    assert body["params"]["available"] == 3

    at_placement = InsufficientStock(3, "p1", "Apples", "kg", at_placement=True)
    assert at_placement.message.startswith("Insufficient stock for Apples")


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_notifications_expire_after_ttl():
    center = NotificationCenter(ttl_seconds=3)
    notifier = Notifier(center)

    notifier.success("order.placed")
    note = center.recent()[0]

    assert note.severity == NotificationSeverity.SUCCESS
    assert center.active(now=note.created_at + timedelta(seconds=2)) == [note]
    assert center.active(now=note.created_at + timedelta(seconds=4)) == []


@pytest.mark.unit
def test_notification_buffer_is_bounded():
    center = NotificationCenter(buffer_size=2)
    for i in range(3):
        center.notify(f"n{i}", NotificationSeverity.ERROR)

    assert [n.message for n in center.recent()] == ["n1", "n2"]


@pytest.mark.unit
def test_reject_reports_and_returns_error():
    center = NotificationCenter()
    error = InsufficientStock(available=1, product_id="p1", unit="kg")

    assert Notifier(center).reject(error) is error
    assert center.recent()[0].message == error.message


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_session_token_round_trip():
    claims = decode_session_token(issue_session_token("u1", "s_1"))

    assert (claims.account_id, claims.session_id) == ("u1", "s_1")


@pytest.mark.unit
def test_tampered_token_is_rejected():
    token = issue_session_token("u1", "s_1")

    with pytest.raises(InvalidToken):
        decode_session_token(token[:-2] + ("aa" if token[-2:] != "aa" else "bb"))


@pytest.mark.unit
def test_persistence_error_renders_with_snapshot_name():
    body = PersistenceError("products").to_dict()

    assert body["code"] == "PERSISTENCE_ERROR"
    assert body["detail"].startswith("We could not save your changes.")
    assert body["params"] == {"snapshot": "products"}
