from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from sqlalchemy import DateTime, Integer, Numeric
from sqlalchemy.orm import DeclarativeBase, mapped_column


# largest value an INTEGER key holds on PostgreSQL
MAX_ID = 2**31 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


intpk = Annotated[
    int,
    mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
]

money = Annotated[
    Decimal,
    mapped_column(
        Numeric(10, 2),
        nullable=False,
    )
]

created_ts = Annotated[
    datetime,
    mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
]

updated_ts = Annotated[
    datetime,
    mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
]
