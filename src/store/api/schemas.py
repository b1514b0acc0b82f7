"""Pydantic request/response schemas for the store API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    quantity: int = 1
    size: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "quantity": 2,
                    "size": "M",
                }
            ]
        }
    }


class UpdateCartItemRequest(BaseModel):
    quantity: int | None = None
    size: str | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    # Checked by checkout itself so that errors come back in checkout order
    full_name: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None


class PlaceOrderRequest(BaseModel):
    shipping_address: ShippingAddressSchema | None = None
    payment_method: str = "Cash"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": {
                        "full_name": "Mona Adel",
                        "phone": "+20 1001234567",
                        "address": "12 Tahrir St",
                        "city": "Cairo",
                        "postal_code": "11511",
                    },
                    "payment_method": "Card",
                }
            ]
        }
    }


class PaymentStatusRequest(BaseModel):
    payment_status: str


class DeliveryStatusRequest(BaseModel):
    delivery_status: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartProductSchema(BaseModel):
    name: str
    images: list[str] = []
    total_price: float
    stock: int
    availability: bool


class CartLineSchema(BaseModel):
    item_id: str
    product_id: str
    quantity: int
    size: str | None = None
    price: float
    product: CartProductSchema | None = None


class CartSchema(BaseModel):
    cart_id: str
    user_id: str
    items: list[CartLineSchema] = []
    total_price: float = Field(ge=0)
    item_count: int = 0


class CartResponse(BaseModel):
    status: str = "success"
    message: str | None = None
    data: CartSchema


class OrderProductSchema(BaseModel):
    name: str
    price: float
    images: list[str] = []


class OrderLineSchema(BaseModel):
    product_id: str
    quantity: int
    price: float
    size: str | None = None
    product: OrderProductSchema | None = None


class OrderShippingSchema(BaseModel):
    full_name: str
    phone: str
    address: str
    city: str
    postal_code: str | None = None
    country: str | None = None


class OrderSchema(BaseModel):
    order_id: str
    user_id: str
    items: list[OrderLineSchema]
    shipping_address: OrderShippingSchema
    payment_method: str
    payment_status: str
    delivery_status: str
    total_price: float
    is_paid: bool = False
    paid_at: datetime | None = None
    is_delivered: bool = False
    delivered_at: datetime | None = None
    created_at: datetime | None = None


class OrderResponse(BaseModel):
    status: str = "success"
    message: str | None = None
    data: OrderSchema


class OrderListResponse(BaseModel):
    status: str = "success"
    data: list[OrderSchema]


class StatusResponse(BaseModel):
    status: str = "success"
    message: str | None = None
