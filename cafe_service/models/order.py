from typing import List

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cafe_service.models.base import Base, intpk, money, created_ts, updated_ts


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[intpk]
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    total_amount: Mapped[money]
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[created_ts]
    updated_at: Mapped[updated_ts]

    order_items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id",
    )
