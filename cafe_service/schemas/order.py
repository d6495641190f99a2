from typing import List

from pydantic import Field, field_validator

from cafe_service.schemas.base import CamelModel, Money, Timestamp
from cafe_service.schemas.order_item import OrderItemIn, OrderItemRead


class OrderCreate(CamelModel):
    customer_name: str = Field(min_length=1, max_length=200)
    order_items: List[OrderItemIn] = Field(min_length=1)

    @field_validator("customer_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Customer name is required")
        return value


class OrderUpdate(CamelModel):
    customer_name: str | None = Field(default=None, min_length=1, max_length=200)
    is_paid: bool | None = None
    order_items: List[OrderItemIn] | None = None


class OrderRead(CamelModel):
    id: int
    customer_name: str
    total_amount: Money
    is_paid: bool
    created_at: Timestamp
    updated_at: Timestamp
    order_items: List[OrderItemRead] = []
