"""Checkout gates that run before anything is written.

Each gate either returns normally or raises; none of them touches an
aggregate, so a failed gate leaves cart, catalog and order history untouched.
"""

import json
from numbers import Number

from store.errors import InsufficientStock, InvalidCartState, InvalidOrderInput
from store.lookups import load_product
from store.order.order import ADDRESS_FIELD_LIMITS, PaymentMethod
from store.shared.phone import is_valid_phone
from store.shared.sizes import is_valid_size

_REQUIRED_ADDRESS_FIELDS = ("full_name", "phone", "address", "city")
_OPTIONAL_ADDRESS_FIELDS = ("postal_code", "country")
ALLOWED_PAYMENT_METHODS = tuple(m.value for m in PaymentMethod)


def _is_valid_line(line):
    quantity = line.get("quantity")
    price = line.get("price")
    return (
        bool(line.get("product_id"))
        and isinstance(quantity, int)
        and not isinstance(quantity, bool)
        and quantity >= 1
        and isinstance(price, Number)
        and not isinstance(price, bool)
        and price >= 0
        and (not line.get("size") or is_valid_size(line["size"]))
    )


def validate_cart_items(lines):
    """Raise ``InvalidCartState`` for an empty cart or the first malformed line."""
    if not isinstance(lines, list):
        raise InvalidCartState({"items": ["Cart items must be a list"]})
    if not lines:
        raise InvalidCartState({"items": ["Cart is empty"]})

    for line in lines:
        if not isinstance(line, dict) or not _is_valid_line(line):
            raise InvalidCartState({"items": [f"Invalid cart item: {json.dumps(line, default=str)}"]})


def validate_order_input(shipping_address, payment_method):
    """Check shipping details and payment method; return the cleaned address.

    Checks run on the stripped values that end up on the order's
    ``ShippingAddress``, against the same length limits.
    """
    address = shipping_address if isinstance(shipping_address, dict) else {}

    missing = [
        name for name in _REQUIRED_ADDRESS_FIELDS if not isinstance(address.get(name), str) or not address[name].strip()
    ]
    if missing:
        raise InvalidOrderInput(
            {name: ["This field is required"] for name in missing}
            | {"shipping_address": ["All shipping address fields are required"]}
        )

    cleaned = {name: address[name].strip() for name in _REQUIRED_ADDRESS_FIELDS}
    for name in _OPTIONAL_ADDRESS_FIELDS:
        value = str(address[name]).strip() if address.get(name) is not None else ""
        if value:
            cleaned[name] = value

    if not is_valid_phone(cleaned["phone"]):
        raise InvalidOrderInput({"phone": ["Invalid phone number format"]})

    too_long = {
        name: [f"Ensure this field has at most {ADDRESS_FIELD_LIMITS[name]} characters"]
        for name, value in cleaned.items()
        if len(value) > ADDRESS_FIELD_LIMITS[name]
    }
    if too_long:
        raise InvalidOrderInput(too_long)

    if payment_method not in ALLOWED_PAYMENT_METHODS:
        raise InvalidOrderInput({"payment_method": ["Invalid payment method"]})

    return cleaned


def quantities_by_product(lines):
    """Total requested quantity per product, summed across sizes."""
    totals = {}
    for line in lines:
        product_id = str(line["product_id"])
        totals[product_id] = totals.get(product_id, 0) + line["quantity"]
    return totals


def verify_stock(lines):
    """Load every product in the cart and check it can cover the requested quantity.

    Returns ``{product_id: (product, quantity)}`` in cart order. The first
    shortfall raises ``InsufficientStock`` naming that product.
    """
    reserved = {}
    for product_id, quantity in quantities_by_product(lines).items():
        product = load_product(product_id)
        if product.stock < quantity:
            raise InsufficientStock(product_id, requested=quantity, available=product.stock)
        reserved[product_id] = (product, quantity)
    return reserved
