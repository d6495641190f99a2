from decimal import Decimal

from cafe_service.service.orders import LineItem
from cafe_service.service.pricing import adjust_total, line_total, order_total, to_money


def test_to_money_quantizes_half_up():
    assert to_money("2.345") == Decimal("2.35")
    assert to_money(Decimal("2.344")) == Decimal("2.34")


def test_to_money_avoids_float_noise():
    assert to_money(0.1 + 0.2) == Decimal("0.30")
    assert to_money(2.5) == Decimal("2.50")


def test_line_total():
    assert line_total(Decimal("3.25"), 3) == Decimal("9.75")


def test_order_total_sums_lines_exactly():
    lines = [
        LineItem(product_id=1, quantity=3, price=Decimal("0.10")),
        LineItem(product_id=2, quantity=7, price=Decimal("0.20")),
    ]
    assert order_total(lines) == Decimal("1.70")


def test_order_total_of_no_lines_is_zero():
    assert order_total([]) == Decimal("0.00")


def test_adjust_total_add_then_remove_restores():
    added = LineItem(product_id=1, quantity=2, price=Decimal("3.25"))
    total = adjust_total(Decimal("5.00"), added=added)
    assert total == Decimal("11.50")
    assert adjust_total(total, removed=added) == Decimal("5.00")


def test_adjust_total_replaces_line():
    old = LineItem(product_id=1, quantity=2, price=Decimal("2.50"))
    new = LineItem(product_id=1, quantity=1, price=Decimal("2.50"))
    assert adjust_total(Decimal("8.25"), removed=old, added=new) == Decimal("5.75")
