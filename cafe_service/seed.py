"""Sample menu and orders for local development."""
from __future__ import annotations

from decimal import Decimal

from loguru import logger
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_service.models.order import Order
from cafe_service.models.order_item import OrderItem
from cafe_service.models.product import Product
from cafe_service.service.commands import execute


MENU = [
    # (name, price, category, description)
    ("Espresso", "2.50", "Coffee", "Single shot of espresso"),
    ("Americano", "3.00", "Coffee", "Espresso topped up with hot water"),
    ("Cappuccino", "3.50", "Coffee", "Espresso with steamed milk and foam"),
    ("Latte", "4.00", "Coffee", "Espresso with plenty of steamed milk"),
    ("Mocha", "4.50", "Coffee", "Espresso, chocolate and steamed milk"),
    ("Black Tea", "2.20", "Tea", "Pot of black tea"),
    ("Green Tea", "2.20", "Tea", "Pot of green tea"),
    ("Hot Chocolate", "3.20", "Tea", "Hot chocolate with whipped cream"),
    ("Croissant", "3.25", "Pastry", "Butter croissant"),
    ("Muffin - Blueberry", "2.75", "Pastry", "Blueberry muffin"),
    ("Cinnamon Roll", "3.50", "Pastry", "Cinnamon roll with icing"),
    ("Soup of the Day", "4.50", "Food", "Served with bread"),
    ("Falafel Wrap", "6.50", "Food", "Falafel, hummus and salad"),
    ("Breakfast Plate", "8.00", "Food", "Eggs, toast and fruit"),
]

SAMPLE_ORDERS = [
    ("Alice", [("Cappuccino", 2), ("Croissant", 1)]),
    ("Bob", [("Espresso", 1), ("Muffin - Blueberry", 1)]),
    ("Charlie", [("Latte", 1), ("Cinnamon Roll", 2)]),
    ("Dana", [("Breakfast Plate", 1), ("Americano", 1)]),
    ("Eve", [("Green Tea", 2), ("Soup of the Day", 1)]),
]


async def clear(db: AsyncSession) -> None:
    await db.execute(delete(OrderItem))
    await db.execute(delete(Order))
    await db.execute(delete(Product))
    await db.commit()


async def seed(db: AsyncSession) -> dict:
    await clear(db)

    by_name: dict[str, Product] = {}
    for name, price, category, description in MENU:
        product = await execute(
            db,
            "create_product",
            name=name,
            price=Decimal(price),
            category=category,
            description=description,
        )
        by_name[name] = product

    for customer, lines in SAMPLE_ORDERS:
        items = [
            {
                "product_id": by_name[name].id,
                "quantity": quantity,
                "price": by_name[name].price,
            }
            for name, quantity in lines
        ]
        await execute(db, "create_order", customer_name=customer, items=items)

    logger.info(
        "Seed completed: products={products}, orders={orders}",
        products=len(MENU),
        orders=len(SAMPLE_ORDERS),
    )
    return {"products": len(MENU), "orders": len(SAMPLE_ORDERS)}
