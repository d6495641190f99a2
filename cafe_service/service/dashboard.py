"""Read-only aggregates over the order store.

Nothing here writes; every figure is computed on demand. Revenue figures sum
the stored ``Order.total_amount`` rather than re-deriving it from line items.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_service.core.metrics import DASHBOARD_QUERIES_TOTAL
from cafe_service.env import (
    SERVICE_NAME,
    TOP_PRODUCTS_WINDOW_DAYS,
    TOP_PRODUCTS_LIMIT,
    DAILY_REVENUE_WINDOW_DAYS,
    RECENT_ORDERS_LIMIT,
)
from cafe_service.models.order import Order
from cafe_service.models.order_item import OrderItem
from cafe_service.models.product import Product
from cafe_service.service.orders import orders_with_items
from cafe_service.service.pricing import ZERO, to_money

REVENUE_PERIODS = {
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
}
DEFAULT_REVENUE_PERIOD = "7d"


def _track(query: str, status: str = "success") -> None:
    DASHBOARD_QUERIES_TOTAL.labels(
        service=SERVICE_NAME,
        query=query,
        status=status,
    ).inc()


def _now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_day_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Start of today and of tomorrow in server local time, as UTC instants."""
    local_now = _now(now).astimezone()
    start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = (start + timedelta(days=1)).astimezone().replace(hour=0, minute=0, second=0, microsecond=0)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def local_date(value: datetime) -> date:
    return _as_utc(value).astimezone().date()


async def count_today_orders(db: AsyncSession, now: datetime | None = None) -> int:
    start, end = local_day_bounds(now)
    return await db.scalar(
        select(func.count(Order.id)).where(Order.created_at >= start, Order.created_at < end)
    ) or 0


async def top_products(
    db: AsyncSession,
    window_days: int = TOP_PRODUCTS_WINDOW_DAYS,
    limit: int = TOP_PRODUCTS_LIMIT,
    now: datetime | None = None,
) -> list[dict]:
    since = _now(now) - timedelta(days=window_days)
    logger.info(
        "Computing top products. window_days={window_days}, limit={limit}",
        window_days=window_days,
        limit=limit,
    )
    total_quantity = func.sum(OrderItem.quantity)
    q = (
        select(
            OrderItem.product_id,
            total_quantity.label("total_quantity"),
            func.count(OrderItem.id).label("order_count"),
        )
        .join(Order, Order.id == OrderItem.order_id)
        .where(Order.created_at >= since)
        .group_by(OrderItem.product_id)
        .order_by(total_quantity.desc(), OrderItem.product_id)
        .limit(limit)
    )
    rows = (await db.execute(q)).all()

    product_ids = [row.product_id for row in rows]
    products = {}
    if product_ids:
        res = await db.execute(select(Product).where(Product.id.in_(product_ids)))
        products = {p.id: p for p in res.scalars().all()}

    _track("top_products")
    return [
        {
            "product": products.get(row.product_id),
            "total_quantity": int(row.total_quantity or 0),
            "order_count": int(row.order_count or 0),
        }
        for row in rows
    ]


async def daily_revenue(
    db: AsyncSession,
    window_days: int = DAILY_REVENUE_WINDOW_DAYS,
    now: datetime | None = None,
) -> list[dict]:
    since = _now(now) - timedelta(days=window_days)
    logger.info(
        "Computing daily revenue. window_days={window_days}",
        window_days=window_days,
    )
    res = await db.execute(
        select(Order.created_at, Order.total_amount)
        .where(Order.created_at >= since)
        .order_by(Order.created_at)
    )

    buckets: dict[date, Decimal] = {}
    for created_at, amount in res.all():
        day = local_date(created_at)
        buckets[day] = buckets.get(day, ZERO) + to_money(amount)

    _track("daily_revenue")
    return [
        {"date": day, "revenue": to_money(revenue)}
        for day, revenue in sorted(buckets.items())
    ]


async def revenue_for_period(
    db: AsyncSession,
    period: str | None = DEFAULT_REVENUE_PERIOD,
    now: datetime | None = None,
) -> dict:
    if period not in REVENUE_PERIODS:
        logger.info(
            "Unknown revenue period '{period}', falling back to {default}",
            period=period,
            default=DEFAULT_REVENUE_PERIOD,
        )
        period = DEFAULT_REVENUE_PERIOD

    since = _now(now) - REVENUE_PERIODS[period]
    res = await db.execute(
        select(Order.total_amount, Order.created_at)
        .where(Order.created_at >= since)
        .order_by(Order.created_at, Order.id)
    )
    rows = res.all()

    revenue = to_money(sum((to_money(amount) for amount, _ in rows), ZERO))
    order_count = len(rows)
    average = to_money(revenue / order_count) if order_count else ZERO

    logger.info(
        "Revenue for period {period}: revenue={revenue}, orders={orders}",
        period=period,
        revenue=str(revenue),
        orders=order_count,
    )
    _track("revenue")
    return {
        "period": period,
        "revenue": revenue,
        "order_count": order_count,
        "average_order_value": average,
        "orders": [
            {"amount": to_money(amount), "date": created_at}
            for amount, created_at in rows
        ],
    }


async def dashboard_stats(db: AsyncSession, now: datetime | None = None) -> dict:
    logger.info("Computing dashboard stats")

    total_orders = await db.scalar(select(func.count(Order.id))) or 0
    today_orders = await count_today_orders(db, now)
    total_revenue = to_money(await db.scalar(select(func.sum(Order.total_amount))) or ZERO)
    active_products = await db.scalar(
        select(func.count(Product.id)).where(Product.is_active.is_(True))
    ) or 0

    res = await db.execute(
        orders_with_items()
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(RECENT_ORDERS_LIMIT)
    )
    recent_orders = list(res.scalars().all())

    stats = {
        "total_orders": total_orders,
        "today_orders": today_orders,
        "total_revenue": total_revenue,
        "active_products": active_products,
        "recent_orders": recent_orders,
        "top_products": await top_products(db, now=now),
        "daily_revenue": await daily_revenue(db, now=now),
    }
    logger.info(
        "Dashboard stats computed. total_orders={total_orders}, today_orders={today_orders}",
        total_orders=total_orders,
        today_orders=today_orders,
    )
    _track("stats")
    return stats
