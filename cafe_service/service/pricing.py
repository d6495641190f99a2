"""Order total arithmetic.

Every path that changes an order's line items computes the new
``total_amount`` here, so creation, bulk replacement and the incremental
item edits all agree to the cent.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Protocol

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


class PricedLine(Protocol):
    price: Decimal
    quantity: int


def to_money(value) -> Decimal:
    if not isinstance(value, Decimal):
        # str() keeps floats like 2.5 from dragging binary noise in
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(price, quantity: int) -> Decimal:
    return to_money(to_money(price) * int(quantity))


def order_total(lines: Iterable[PricedLine]) -> Decimal:
    total = ZERO
    for line in lines:
        total += line_total(line.price, line.quantity)
    return to_money(total)


def adjust_total(
    current,
    removed: PricedLine | None = None,
    added: PricedLine | None = None,
) -> Decimal:
    """Apply an incremental change: subtract ``removed`` and add ``added``."""
    total = to_money(current if current is not None else ZERO)
    if removed is not None:
        total -= line_total(removed.price, removed.quantity)
    if added is not None:
        total += line_total(added.price, added.quantity)
    return to_money(total)
