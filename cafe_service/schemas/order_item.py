from decimal import Decimal

from pydantic import Field

from cafe_service.models.base import MAX_ID
from cafe_service.schemas.base import CamelModel, EntityId, Money
from cafe_service.schemas.product import ProductRead


class OrderItemIn(CamelModel):
    product_id: EntityId
    quantity: int = Field(gt=0, le=MAX_ID)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)


class OrderItemRead(CamelModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Money
    product: ProductRead | None = None
