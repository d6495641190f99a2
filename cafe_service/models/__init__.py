from cafe_service.models.base import Base
from cafe_service.models.product import Product
from cafe_service.models.order import Order
from cafe_service.models.order_item import OrderItem

__all__ = ["Base", "Product", "Order", "OrderItem"]
