from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cafe_service.core.exceptions import NotFoundError, ValidationError
from cafe_service.core.metrics import ORDERS_SERVICE_OPERATIONS_TOTAL
from cafe_service.env import SERVICE_NAME
from cafe_service.models.base import MAX_ID
from cafe_service.models.order import Order
from cafe_service.models.order_item import OrderItem
from cafe_service.models.product import Product
from cafe_service.service.pricing import adjust_total, order_total, to_money


@dataclass(frozen=True)
class LineItem:
    """A requested order line: product, quantity and the point-of-sale price."""

    product_id: int
    quantity: int
    price: Decimal

    @classmethod
    def parse(cls, raw: Any) -> "LineItem":
        if isinstance(raw, LineItem):
            return raw
        if isinstance(raw, dict):
            get = raw.get
        else:
            def get(key):
                return getattr(raw, key, None)

        product_id = get("product_id")
        quantity = get("quantity")
        price = get("price")

        if not isinstance(product_id, int) or isinstance(product_id, bool) or not 0 < product_id <= MAX_ID:
            raise ValidationError("productId must be a positive integer")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or not 1 <= quantity <= MAX_ID:
            raise ValidationError("quantity must be a positive integer")
        try:
            price = to_money(price)
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError("price must be a number")
        if price <= 0:
            raise ValidationError("price must be positive")
        return cls(product_id=product_id, quantity=quantity, price=price)


def _track(operation: str, status: str) -> None:
    ORDERS_SERVICE_OPERATIONS_TOTAL.labels(
        service=SERVICE_NAME,
        operation=operation,
        status=status,
    ).inc()


def orders_with_items():
    return (
        select(Order)
        .options(selectinload(Order.order_items).selectinload(OrderItem.product))
        .execution_options(populate_existing=True)
    )


def _parse_lines(items: Iterable[Any] | None) -> list[LineItem]:
    if items is None:
        raise ValidationError("Order items are required")
    return [LineItem.parse(raw) for raw in items]


async def _ensure_products_exist(db: AsyncSession, product_ids: Iterable[int]) -> None:
    wanted = set(product_ids)
    if not wanted:
        return
    found = set(
        (await db.execute(select(Product.id).where(Product.id.in_(wanted)))).scalars().all()
    )
    missing = sorted(wanted - found)
    if missing:
        logger.warning(
            "Order references unknown products. product_ids={product_ids}",
            product_ids=missing,
        )
        raise ValidationError(
            "Unknown product id(s) in order items",
            details={"productIds": missing},
        )


async def _lock_order(db: AsyncSession, order_id: int, with_items: bool = False) -> Order:
    # FOR UPDATE serializes mutations of one order where the backend supports it
    q = (
        select(Order)
        .where(Order.id == order_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    if with_items:
        q = q.options(selectinload(Order.order_items))
    order = (await db.execute(q)).scalar_one_or_none()
    if order is None:
        logger.warning(
            "Order not found. order_id='{order_id}'",
            order_id=order_id,
        )
        raise NotFoundError("Order not found")
    return order


async def _get_owned_item(db: AsyncSession, order_id: int, item_id: int) -> OrderItem:
    item = await db.get(OrderItem, item_id)
    if item is None or item.order_id != order_id:
        logger.warning(
            "Order item not found in order. order_id='{order_id}', item_id='{item_id}'",
            order_id=order_id,
            item_id=item_id,
        )
        raise NotFoundError("Order item not found")
    return item


async def _load_item(db: AsyncSession, item_id: int) -> OrderItem:
    q = (
        select(OrderItem)
        .options(selectinload(OrderItem.product))
        .where(OrderItem.id == item_id)
        .execution_options(populate_existing=True)
    )
    return (await db.execute(q)).scalar_one()


async def list_orders(db: AsyncSession) -> list[Order]:
    logger.info("Service list_orders called")
    res = await db.execute(orders_with_items().order_by(Order.created_at.desc(), Order.id.desc()))
    orders = list(res.scalars().all())
    logger.info(
        "Service list_orders completed, count={count}",
        count=len(orders),
    )
    _track("list", "success")
    return orders


async def get_order(db: AsyncSession, order_id: int) -> Order:
    logger.info(
        "Service get_order called. order_id='{order_id}'",
        order_id=order_id,
    )
    res = await db.execute(orders_with_items().where(Order.id == order_id))
    order = res.scalar_one_or_none()
    if order is None:
        logger.warning(
            "Service get_order: order not found. order_id='{order_id}'",
            order_id=order_id,
        )
        _track("get", "not_found")
        raise NotFoundError("Order not found")
    _track("get", "success")
    return order


async def create_order(
    db: AsyncSession,
    customer_name: str,
    items: Sequence[Any],
) -> Order:
    logger.info(
        "Service create_order called for customer='{customer}' with {items_count} items",
        customer=customer_name,
        items_count=len(items) if items else 0,
    )
    if customer_name is None or not str(customer_name).strip():
        _track("create", "invalid")
        raise ValidationError("Customer name is required")
    if not items:
        logger.warning("Service create_order called without items")
        _track("create", "no_items")
        raise ValidationError("At least one order item is required")

    try:
        lines = _parse_lines(items)
        await _ensure_products_exist(db, (line.product_id for line in lines))
    except ValidationError:
        _track("create", "invalid")
        raise

    order = Order(
        customer_name=str(customer_name).strip(),
        total_amount=order_total(lines),
        is_paid=False,
        order_items=[
            OrderItem(product_id=line.product_id, quantity=line.quantity, price=line.price)
            for line in lines
        ],
    )
    db.add(order)
    await db.flush()

    logger.info(
        "Service create_order persisted order. order_id='{order_id}', total={total}",
        order_id=order.id,
        total=str(order.total_amount),
    )
    _track("create", "success")
    return await get_order(db, order.id)


async def replace_order_items(db: AsyncSession, order_id: int, items: Sequence[Any]) -> Order:
    logger.info(
        "Service replace_order_items called. order_id='{order_id}', items_count={items_count}",
        order_id=order_id,
        items_count=len(items) if items is not None else 0,
    )
    try:
        lines = _parse_lines(items)
    except ValidationError:
        _track("replace_items", "invalid")
        raise

    order = await _lock_order(db, order_id, with_items=True)
    await _ensure_products_exist(db, (line.product_id for line in lines))

    # delete-orphan removes the old rows in the same flush as the inserts
    order.order_items.clear()
    order.order_items.extend(
        OrderItem(product_id=line.product_id, quantity=line.quantity, price=line.price)
        for line in lines
    )
    order.total_amount = order_total(lines)
    await db.flush()

    logger.info(
        "Service replace_order_items completed. order_id='{order_id}', total={total}",
        order_id=order_id,
        total=str(order.total_amount),
    )
    _track("replace_items", "success")
    return await get_order(db, order_id)


async def update_order(
    db: AsyncSession,
    order_id: int,
    customer_name: str | None = None,
    is_paid: bool | None = None,
    items: Sequence[Any] | None = None,
) -> Order:
    logger.info(
        "Service update_order called. order_id='{order_id}', replace_items={replace}",
        order_id=order_id,
        replace=items is not None,
    )
    try:
        if customer_name is not None and not str(customer_name).strip():
            raise ValidationError("Customer name must not be empty")
        lines = _parse_lines(items) if items is not None else None
    except ValidationError:
        _track("update", "invalid")
        raise

    order = await _lock_order(db, order_id)
    if customer_name is not None:
        order.customer_name = str(customer_name).strip()
    if is_paid is not None:
        order.is_paid = bool(is_paid)

    if lines is not None:
        # header changes must be flushed before the reload in replace_order_items
        await db.flush()
        order = await replace_order_items(db, order_id, lines)
        _track("update", "success")
        return order

    await db.flush()
    _track("update", "success")
    return await get_order(db, order_id)


async def add_item(
    db: AsyncSession,
    order_id: int,
    product_id: int,
    quantity: int,
    price: Any,
) -> OrderItem:
    logger.info(
        "Service add_item called. order_id='{order_id}', product_id='{product_id}', qty={qty}",
        order_id=order_id,
        product_id=product_id,
        qty=quantity,
    )
    line = LineItem.parse({"product_id": product_id, "quantity": quantity, "price": price})
    order = await _lock_order(db, order_id)
    if await db.get(Product, line.product_id) is None:
        _track("add_item", "product_not_found")
        raise NotFoundError("Product not found")

    item = OrderItem(
        order_id=order.id,
        product_id=line.product_id,
        quantity=line.quantity,
        price=line.price,
    )
    db.add(item)
    order.total_amount = adjust_total(order.total_amount, added=line)
    await db.flush()

    logger.info(
        "Service add_item completed. order_id='{order_id}', item_id='{item_id}', total={total}",
        order_id=order_id,
        item_id=item.id,
        total=str(order.total_amount),
    )
    _track("add_item", "success")
    return await _load_item(db, item.id)


async def update_item(
    db: AsyncSession,
    order_id: int,
    item_id: int,
    product_id: int,
    quantity: int,
    price: Any,
) -> OrderItem:
    logger.info(
        "Service update_item called. order_id='{order_id}', item_id='{item_id}'",
        order_id=order_id,
        item_id=item_id,
    )
    new_line = LineItem.parse({"product_id": product_id, "quantity": quantity, "price": price})
    order = await _lock_order(db, order_id)
    item = await _get_owned_item(db, order_id, item_id)
    if await db.get(Product, new_line.product_id) is None:
        _track("update_item", "product_not_found")
        raise NotFoundError("Product not found")

    old_line = LineItem(product_id=item.product_id, quantity=item.quantity, price=to_money(item.price))
    item.product_id = new_line.product_id
    item.quantity = new_line.quantity
    item.price = new_line.price
    order.total_amount = adjust_total(order.total_amount, removed=old_line, added=new_line)
    await db.flush()

    logger.info(
        "Service update_item completed. order_id='{order_id}', item_id='{item_id}', total={total}",
        order_id=order_id,
        item_id=item_id,
        total=str(order.total_amount),
    )
    _track("update_item", "success")
    return await _load_item(db, item.id)


async def remove_item(db: AsyncSession, order_id: int, item_id: int) -> dict:
    logger.info(
        "Service remove_item called. order_id='{order_id}', item_id='{item_id}'",
        order_id=order_id,
        item_id=item_id,
    )
    order = await _lock_order(db, order_id)
    item = await _get_owned_item(db, order_id, item_id)

    order.total_amount = adjust_total(order.total_amount, removed=item)
    await db.delete(item)
    await db.flush()

    logger.info(
        "Service remove_item completed. order_id='{order_id}', total={total}",
        order_id=order_id,
        total=str(order.total_amount),
    )
    _track("remove_item", "success")
    return {"message": "Order item removed successfully"}


async def delete_order(db: AsyncSession, order_id: int) -> dict:
    logger.info(
        "Service delete_order called. order_id='{order_id}'",
        order_id=order_id,
    )
    order = await _lock_order(db, order_id, with_items=True)
    await db.delete(order)
    await db.flush()

    logger.info(
        "Service delete_order completed. order_id='{order_id}'",
        order_id=order_id,
    )
    _track("delete", "success")
    return {"message": "Order deleted successfully"}
