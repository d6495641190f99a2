import datetime as dt
from typing import List

from cafe_service.schemas.base import CamelModel, Money, Timestamp
from cafe_service.schemas.order import OrderRead
from cafe_service.schemas.product import ProductRead


class TopProduct(CamelModel):
    product: ProductRead | None
    total_quantity: int
    order_count: int


class DailyRevenue(CamelModel):
    date: dt.date
    revenue: Money


class DashboardStats(CamelModel):
    total_orders: int
    today_orders: int
    total_revenue: Money
    active_products: int
    recent_orders: List[OrderRead]
    top_products: List[TopProduct]
    daily_revenue: List[DailyRevenue]


class RevenuePoint(CamelModel):
    amount: Money
    date: Timestamp


class RevenueReport(CamelModel):
    period: str
    revenue: Money
    order_count: int
    average_order_value: Money
    orders: List[RevenuePoint]
