"""Price arithmetic shared by products, carts and orders."""

from decimal import ROUND_HALF_UP, Decimal

WHOLE_UNIT = Decimal("1")
CENT = Decimal("0.01")


def discounted_price(price, discount) -> float:
    """Price after a percentage discount, rounded half-up to a whole currency unit.

    Never negative.
    """
    value = Decimal(str(price)) * (Decimal("1") - Decimal(str(discount or 0)) / Decimal("100"))
    value = max(value, Decimal("0"))
    return float(value.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP))


def line_total(lines) -> float:
    """Sum of ``price * quantity`` over objects (or dicts) with those attributes."""
    total = Decimal("0")
    for line in lines:
        price = line["price"] if isinstance(line, dict) else line.price
        quantity = line["quantity"] if isinstance(line, dict) else line.quantity
        total += Decimal(str(price)) * quantity
    return float(total.quantize(CENT, rounding=ROUND_HALF_UP))


def same_amount(a, b) -> bool:
    return abs((a or 0.0) - (b or 0.0)) < 0.005
