from decimal import Decimal

from pydantic import Field, field_validator

from cafe_service.schemas.base import CamelModel, Money, Timestamp


class ProductBase(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)

    @field_validator("name", "category", "description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1)
    is_active: bool | None = None


class ProductRead(CamelModel):
    id: int
    name: str
    price: Money
    category: str
    description: str
    is_active: bool
    created_at: Timestamp
    updated_at: Timestamp
