"""Order aggregate — the purchase record produced by checkout.

An order is created once, from a cart snapshot, and its lines and total never
change afterwards. Only the two status machines move:

Payment:  PENDING → PAID | FAILED;  FAILED → PENDING | PAID;  PAID → REFUNDED
Delivery: PROCESSING → SHIPPED | CANCELLED;  SHIPPED → DELIVERED | CANCELLED
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from store.domain import store
from store.order.events import DeliveryStatusChanged, OrderPlaced, PaymentStatusChanged
from store.shared.money import line_total, same_amount
from store.shared.phone import is_valid_phone
from store.shared.sizes import Size

DEFAULT_COUNTRY = "Egypt"

ADDRESS_FIELD_LIMITS = {
    "full_name": 100,
    "phone": 15,
    "address": 255,
    "city": 100,
    "postal_code": 20,
    "country": 100,
}


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentMethod(Enum):
    CASH = "Cash"
    CARD = "Card"
    PAYPAL = "PayPal"


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"
    REFUNDED = "Refunded"


class DeliveryStatus(Enum):
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PENDING, PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),  # Terminal
}

_DELIVERY_TRANSITIONS = {
    DeliveryStatus.PROCESSING: {DeliveryStatus.SHIPPED, DeliveryStatus.CANCELLED},
    DeliveryStatus.SHIPPED: {DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED},
    DeliveryStatus.DELIVERED: set(),  # Terminal
    DeliveryStatus.CANCELLED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@store.value_object(part_of="Order")
class ShippingAddress:
    """Where the order is delivered, captured at checkout and never changed."""

    full_name = String(required=True, max_length=ADDRESS_FIELD_LIMITS["full_name"])
    phone = String(required=True, max_length=ADDRESS_FIELD_LIMITS["phone"])
    address = String(required=True, max_length=ADDRESS_FIELD_LIMITS["address"])
    city = String(required=True, max_length=ADDRESS_FIELD_LIMITS["city"])
    postal_code = String(max_length=ADDRESS_FIELD_LIMITS["postal_code"])
    country = String(max_length=ADDRESS_FIELD_LIMITS["country"], default=DEFAULT_COUNTRY)

    @invariant.post
    def phone_must_look_like_a_phone_number(self):
        if not is_valid_phone(self.phone):
            raise ValidationError({"phone": ["Invalid phone number format"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@store.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    size = String(choices=Size)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@store.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress, required=True)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    delivery_status = String(choices=DeliveryStatus, default=DeliveryStatus.PROCESSING.value)
    total_price = Float(required=True, min_value=0.0)
    is_paid = Boolean(default=False)
    paid_at = DateTime()
    is_delivered = Boolean(default=False)
    delivered_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order must contain at least one item"]})

    @invariant.post
    def total_price_matches_items(self):
        if not same_amount(self.total_price, line_total(self.items)):
            raise ValidationError({"total_price": ["Order total must equal the sum of its lines"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, items_data, shipping_address, payment_method=PaymentMethod.CASH.value):
        """Create an order from cart lines.

        Args:
            user_id: The user placing the order.
            items_data: List of dicts with product_id, quantity, price, size.
            shipping_address: Dict with full_name, phone, address, city,
                              and optionally postal_code and country.
            payment_method: One of the ``PaymentMethod`` values.
        """
        now = datetime.now(UTC)
        address = dict(shipping_address)
        if not address.get("country"):
            address["country"] = DEFAULT_COUNTRY

        order = cls(
            user_id=user_id,
            items=[
                OrderItem(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                    price=item["price"],
                    size=item.get("size"),
                )
                for item in items_data
            ],
            shipping_address=ShippingAddress(**address),
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING.value,
            delivery_status=DeliveryStatus.PROCESSING.value,
            total_price=line_total(items_data),
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                item_count=len(order.items),
                total_price=order.total_price,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status machines
    # -------------------------------------------------------------------
    def change_payment_status(self, new_status):
        target = _parse(PaymentStatus, new_status, "payment_status")
        current = PaymentStatus(self.payment_status)
        if target not in _PAYMENT_TRANSITIONS[current]:
            raise ValidationError(
                {"payment_status": [f"Cannot transition from {current.value} to {target.value}"]}
            )

        now = datetime.now(UTC)
        self.payment_status = target.value
        if target == PaymentStatus.PAID:
            self.is_paid = True
            self.paid_at = now
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def change_delivery_status(self, new_status):
        target = _parse(DeliveryStatus, new_status, "delivery_status")
        current = DeliveryStatus(self.delivery_status)
        if target not in _DELIVERY_TRANSITIONS[current]:
            raise ValidationError(
                {"delivery_status": [f"Cannot transition from {current.value} to {target.value}"]}
            )

        now = datetime.now(UTC)
        self.delivery_status = target.value
        if target == DeliveryStatus.DELIVERED:
            self.is_delivered = True
            self.delivered_at = now
        self.updated_at = now

        self.raise_(
            DeliveryStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )


def _parse(enum_cls, value, field):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(s.value for s in enum_cls)
        raise ValidationError({field: [f"Invalid {field.replace('_', ' ')}: {value}. Allowed: {allowed}"]}) from None
