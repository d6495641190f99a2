from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from loguru import logger
from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_service.core.exceptions import ConflictError, NotFoundError, ValidationError
from cafe_service.core.metrics import PRODUCTS_OPERATIONS_TOTAL
from cafe_service.env import SERVICE_NAME
from cafe_service.models.order_item import OrderItem
from cafe_service.models.product import Product
from cafe_service.service.pricing import to_money

UPDATABLE_FIELDS = ("name", "price", "category", "description", "is_active")
REQUIRED_TEXT_FIELDS = ("name", "category", "description")


def _track(operation: str, status: str) -> None:
    PRODUCTS_OPERATIONS_TOTAL.labels(
        service=SERVICE_NAME,
        operation=operation,
        status=status,
    ).inc()


def _clean_text(field: str, value: Any) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field.capitalize()} is required")
    return str(value).strip()


def _clean_price(value: Any) -> Decimal:
    try:
        price = to_money(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Price must be a number")
    if price <= 0:
        raise ValidationError("Price must be positive")
    return price


async def list_active_products(db: AsyncSession) -> list[Product]:
    logger.info("Request to get active products from DB")

    result = await db.execute(
        select(Product)
        .where(Product.is_active.is_(True))
        .order_by(Product.category, Product.name)
    )
    products = list(result.scalars().all())

    logger.info(
        "Active products retrieved from DB, count={count}",
        count=len(products),
    )
    _track("list", "success")
    return products


async def get_product(db: AsyncSession, product_id: int) -> Product:
    logger.info(
        "Request to get product from DB with id={id}",
        id=product_id,
    )

    product = await db.get(Product, product_id)
    if product is None:
        logger.warning(
            "Product not found in DB with id={id}",
            id=product_id,
        )
        _track("get", "not_found")
        raise NotFoundError("Product not found")

    _track("get", "success")
    return product


async def create_product(
    db: AsyncSession,
    name: str,
    price: Any,
    category: str,
    description: str,
) -> Product:
    logger.info(
        "Attempt to create a new product name='{name}', category='{category}'",
        name=name,
        category=category,
    )
    try:
        product = Product(
            name=_clean_text("name", name),
            price=_clean_price(price),
            category=_clean_text("category", category),
            description=_clean_text("description", description),
            is_active=True,
        )
    except ValidationError:
        _track("create", "invalid")
        raise

    db.add(product)
    await db.flush()
    await db.refresh(product)

    logger.info(
        "Product successfully created in DB: id={id}",
        id=product.id,
    )
    _track("create", "success")
    return product


async def update_product(db: AsyncSession, product_id: int, fields: Mapping[str, Any]) -> Product:
    logger.info(
        "Attempt to update product with id={id}",
        id=product_id,
    )
    product = await get_product(db, product_id)

    changes: dict[str, Any] = {}
    try:
        for field, value in fields.items():
            if field not in UPDATABLE_FIELDS:
                raise ValidationError(f"Unknown product field '{field}'")
            if field in REQUIRED_TEXT_FIELDS:
                changes[field] = _clean_text(field, value)
            elif field == "price":
                changes[field] = _clean_price(value)
            elif field == "is_active":
                if value is None:
                    raise ValidationError("isActive must be true or false")
                changes[field] = bool(value)
    except ValidationError:
        _track("update", "invalid")
        raise

    logger.debug(
        "Applying updates to product id={id}: fields={fields}",
        id=product_id,
        fields=list(changes.keys()),
    )
    for field, value in changes.items():
        setattr(product, field, value)

    await db.flush()
    await db.refresh(product)

    logger.info(
        "Product successfully updated in DB: id={id}",
        id=product_id,
    )
    _track("update", "success")
    return product


async def deactivate_product(db: AsyncSession, product_id: int) -> Product:
    logger.info(
        "Attempt to deactivate product with id={id}",
        id=product_id,
    )
    product = await get_product(db, product_id)
    product.is_active = False

    await db.flush()
    await db.refresh(product)

    logger.info(
        "Product with id={id} deactivated",
        id=product_id,
    )
    _track("deactivate", "success")
    return product


async def is_product_referenced(db: AsyncSession, product_id: int) -> bool:
    return bool(
        await db.scalar(select(exists().where(OrderItem.product_id == product_id)))
    )


async def delete_product_hard(db: AsyncSession, product_id: int) -> dict:
    logger.info(
        "Attempt to delete product with id={id}",
        id=product_id,
    )
    product = await get_product(db, product_id)

    if await is_product_referenced(db, product_id):
        logger.warning(
            "Refusing to delete product referenced by order items, id={id}",
            id=product_id,
        )
        _track("delete", "conflict")
        raise ConflictError("Cannot delete product that is referenced in orders")

    await db.delete(product)
    await db.flush()

    logger.info(
        "Product with id={id} successfully deleted from DB",
        id=product_id,
    )
    _track("delete", "success")
    return {"message": "Product deleted successfully"}
