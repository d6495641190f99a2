from typing import List

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cafe_service.models.base import Base, intpk, money, created_ts, updated_ts


class Product(Base):
    __tablename__ = "products"

    id: Mapped[intpk]
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[money]
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[created_ts]
    updated_at: Mapped[updated_ts]

    # passive_deletes: the RESTRICT foreign key guards referenced products
    order_items: Mapped[List["OrderItem"]] = relationship(
        back_populates="product",
        passive_deletes="all",
    )
