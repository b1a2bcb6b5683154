"""
Factories for creating valid test records.

Every factory produces a valid domain record. Override any field via kwargs.

Usage:
    product = ProductFactory.create(stock=3)
    added = await market.catalog.add_product(ProductFactory.data(stock=3))
"""

import uuid
from decimal import Decimal

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex[:8]}@test.com"


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class ProductFactory:
    @staticmethod
    def data(**overrides) -> dict:
        """Fields for ``CatalogStore.add_product`` (no id)."""
        defaults = {
            "name": "Test Mangoes",
            "price": Decimal("2.00"),
            "stock": 10,
            "unit": "kg",
            "category": "Fruits",
            "seller_id": "u2",
            "enabled": True,
            "description": "Ripe test mangoes.",
        }
        defaults.update(overrides)
        return defaults

    @staticmethod
    def create(**overrides):
        from services.market_service.models import Product

        data = ProductFactory.data(**overrides)
        data.setdefault("id", f"p_{uuid.uuid4().hex[:8]}")
        return Product(**data)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class AddressFactory:
    @staticmethod
    def create(**overrides):
        from services.market_service.models import Address

        defaults = {
            "full_name": "Test Buyer",
            "phone": "9876543210",
            "street": "12 Test Street",
            "city": "Bengaluru",
            "district": "Bengaluru Urban",
            "state": "Karnataka",
            "country": "India",
            "pincode": "560001",
        }
        defaults.update(overrides)
        return Address(**defaults)


class AccountFactory:
    @staticmethod
    def registration(**overrides) -> dict:
        """Fields for ``AccountStore.register`` (password passed separately)."""
        defaults = {
            "full_name": "Test Buyer",
            "email": _unique_email(),
            "mobile": "9876543210",
            "role": "Buyer",
            "delivery_address": AddressFactory.create(),
        }
        defaults.update(overrides)
        return defaults

    @staticmethod
    def farmer_registration(**overrides) -> dict:
        defaults = AccountFactory.registration(
            full_name="Test Farmer",
            role="Farmer",
            delivery_address=None,
            farm_location="Test Farm, Mysuru",
            farm_city="Mysuru",
            farm_district="Mysuru",
            farm_state="Karnataka",
            farmer_type="Vegetables",
        )
        defaults.update(overrides)
        return defaults

    @staticmethod
    def create(**overrides):
        from services.market_service.models import Account

        defaults = {
            "id": f"u_{uuid.uuid4().hex[:8]}",
            "full_name": "Test Account",
            "email": _unique_email(),
            "mobile": "9876543210",
            "password_hash": "not-a-real-hash",
            "role": "Buyer",
            "active": True,
        }
        defaults.update(overrides)
        return Account(**defaults)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


def address_payload(**overrides) -> dict:
    return AddressFactory.create(**overrides).model_dump()


# ---------------------------------------------------------------------------
# Snapshot stores
# ---------------------------------------------------------------------------


class FailingSnapshotStore:
    """Wraps a real snapshot store; saves under ``failing`` keys raise.

    Change ``failing`` mid-test to make a particular write fail.
    """

    def __init__(self, inner, failing=()):
        self._inner = inner
        self.failing = set(failing)

    async def load(self, key):
        return await self._inner.load(key)

    async def save(self, key, payload):
        from services.market_service.errors import PersistenceError

        if key in self.failing:
            raise PersistenceError(key)
        await self._inner.save(key, payload)
