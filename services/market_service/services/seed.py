"""Built-in seed dataset.

Used on first start and whenever a persisted snapshot is missing or
unusable. Every call returns fresh copies.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from services.market_service.models import (
    Account,
    Address,
    CartLine,
    Category,
    FarmerType,
    Order,
    OrderStatus,
    PaymentDetails,
    PaymentMethod,
    Product,
    UserRole,
)
from services.market_service.services.passwords import hash_password

_IMG = "https://images.pexels.com/photos/{}?auto=compress&cs=tinysrgb&w=1260&h=750&dpr=2"

SEED_FARMER_ID = "u2"

CATEGORIES = [
    Category(id="cat1", name="Fruits", image_url=_IMG.format("1132047/pexels-photo-1132047.jpeg")),
    Category(id="cat2", name="Vegetables", image_url=_IMG.format("1459339/pexels-photo-1459339.jpeg")),
    Category(id="cat3", name="Grains", image_url=_IMG.format("1796695/pexels-photo-1796695.jpeg")),
    Category(id="cat4", name="Others", image_url=_IMG.format("842519/pexels-photo-842519.jpeg")),
]

# (id, name, price, category, unit, stock, harvest_date, is_organic, description, image)
_PRODUCT_ROWS = [
    ("p2", "Organic Strawberries", "4.99", "Fruits", "kg", 50, date(2025, 5, 10), True,
     "Plump and sweet strawberries, perfect for desserts.", "2152/vegetables-potatoes-food-fresh.jpg"),
    ("p1", "Organic Apples", "2.99", "Fruits", "kg", 10, date(2025, 5, 12), True,
     "Crisp, sweet, and juicy apples, grown without pesticides.", "102104/pexels-photo-102104.jpeg"),
    ("p3", "Juicy Oranges", "3.25", "Fruits", "kg", 80, date(2025, 5, 8), False,
     "Full of Vitamin C, perfect for a healthy snack.", "161559/background-bitter-breakfast-bright-161559.jpeg"),
    ("p13", "Organic Bananas", "1.99", "Fruits", "kg", 120, date(2025, 5, 15), True,
     "Sweet and creamy organic bananas, a perfect energy booster.", "2280927/pexels-photo-2280927.jpeg"),
    ("p5", "Fresh Carrots", "2.49", "Vegetables", "kg", 5, date(2025, 5, 11), True,
     "Sweet and crunchy carrots, great for snacking or cooking.", "1306559/pexels-photo-1306559.jpeg"),
    ("p4", "Heirloom Tomatoes", "3.99", "Vegetables", "kg", 60, date(2025, 5, 9), True,
     "Colorful and flavorful tomatoes for salads and sauces.", "1327838/pexels-photo-1327838.jpeg"),
    ("p6", "Leafy Spinach", "2.50", "Vegetables", "kg", 90, date(2025, 5, 13), False,
     "Fresh spinach, packed with nutrients.", "2325843/pexels-photo-2325843.jpeg"),
    ("p15", "Fresh Broccoli", "2.29", "Vegetables", "kg", 65, date(2025, 5, 14), True,
     "Fresh broccoli florets, packed with vitamins.", "47347/broccoli-vegetable-food-healthy-47347.jpeg"),
    ("p7", "Whole Wheat Bread", "3.99", "Grains", "loaf", 40, None, False,
     "Freshly baked whole wheat bread for all your needs.", "1775043/pexels-photo-1775043.jpeg"),
    ("p8", "Organic Oats", "4.25", "Grains", "kg", 60, None, False,
     "Rolled oats for a hearty and healthy breakfast.", "374052/pexels-photo-374052.jpeg"),
    ("p11", "Farm-Fresh Eggs", "5.99", "Others", "dozen", 150, None, False,
     "A dozen fresh, free-range chicken eggs.", "162712/egg-white-food-protein-162712.jpeg"),
]


def seed_products() -> list[Product]:
    return [
        Product(
            id=pid,
            name=name,
            price=Decimal(price),
            category=category,
            unit=unit,
            stock=stock,
            seller_id=SEED_FARMER_ID,
            enabled=True,
            harvest_date=harvest,
            is_organic=organic,
            description=description,
            image_url=_IMG.format(image),
        )
        for pid, name, price, category, unit, stock, harvest, organic, description, image in _PRODUCT_ROWS
    ]


def seed_accounts() -> list[Account]:
    return [
        Account(
            id="u1",
            full_name="John Doe",
            email="buyer@example.com",
            password_hash=hash_password("password123"),
            mobile="1234567890",
            role=UserRole.BUYER,
            active=True,
            delivery_address=Address(
                full_name="John Doe",
                phone="1234567890",
                street="123 Main St",
                city="Bengaluru",
                district="Bengaluru Urban",
                state="Karnataka",
                country="India",
                pincode="560001",
            ),
            wallet_balance=Decimal("100"),
        ),
        Account(
            id=SEED_FARMER_ID,
            full_name="Jane Farmer",
            email="farmer@example.com",
            password_hash=hash_password("password123"),
            mobile="0987654321",
            role=UserRole.FARMER,
            active=True,
            farm_location="Green Valley, Mysuru",
            farm_city="Mysuru",
            farm_district="Mysuru",
            farm_state="Karnataka",
            farmer_type=FarmerType.VEGETABLES,
            payment_details=PaymentDetails(upi_id="jane@farm"),
        ),
        Account(
            id="u3",
            full_name="Market Owner",
            email="owner@example.com",
            password_hash=hash_password("password123"),
            mobile="5555555555",
            role=UserRole.BUYER,
            active=True,
            is_owner=True,
            delivery_address=Address(
                full_name="Market Owner",
                phone="5555555555",
                street="1 Market Rd",
                city="Big City",
                district="Big District",
                state="New York",
                country="USA",
                pincode="54321",
            ),
        ),
        Account(
            id="u_admin",
            full_name="Admin User",
            email="admin@example.com",
            password_hash=hash_password("admin@123"),
            mobile="1112223334",
            role=UserRole.ADMIN,
            active=True,
            is_owner=True,
        ),
    ]


def seed_orders() -> list[Order]:
    strawberries = next(p for p in seed_products() if p.id == "p2")
    return [
        Order(
            id="ord1",
            buyer_id="u1",
            seller_id=SEED_FARMER_ID,
            items=[CartLine(snapshot=strawberries, quantity=2)],
            subtotal=Decimal("9.98"),
            shipping_fee=Decimal("2.50"),
            total=Decimal("12.48"),
            status=OrderStatus.DELIVERED,
            shipping_address=Address(
                full_name="John Doe",
                phone="1234567890",
                street="123 Main St",
                city="Anytown",
                district="Any District",
                state="California",
                country="USA",
                pincode="12345",
            ),
            payment_method=PaymentMethod.CARD,
            created_at=datetime(2024, 7, 20, 10, 0, tzinfo=timezone.utc),
        )
    ]
