"""FastAPI routes for the store — cart and orders.

The requesting user is identified by the ``X-User-Id`` header, set by the
authenticating gateway in front of this service.
"""

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from store.api.schemas import (
    AddToCartRequest,
    CartResponse,
    DeliveryStatusRequest,
    OrderListResponse,
    OrderResponse,
    PaymentStatusRequest,
    PlaceOrderRequest,
    StatusResponse,
    UpdateCartItemRequest,
)
from store.cart.items import AddToCart, RemoveFromCart, UpdateCartItem
from store.cart.management import ClearCart, OpenCart
from store.cart.queries import cart_view
from store.checkout.placement import place_order
from store.order.history import order_history, order_view
from store.order.order import Order
from store.order.status import ChangeDeliveryStatus, ChangePaymentStatus
from store.utils.concurrency import process_with_retry

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(x_user_id: str = Header()) -> CartResponse:
    cart_id = process_with_retry(OpenCart(user_id=x_user_id))
    return CartResponse(data=cart_view(cart_id))


@cart_router.post("/items/{product_id}", response_model=CartResponse)
async def add_to_cart(product_id: str, body: AddToCartRequest, x_user_id: str = Header()) -> CartResponse:
    command = AddToCart(
        user_id=x_user_id,
        product_id=product_id,
        quantity=body.quantity,
        size=body.size,
    )
    cart_id = process_with_retry(command)
    return CartResponse(message="Product added to cart", data=cart_view(cart_id))


@cart_router.patch("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(product_id: str, body: UpdateCartItemRequest, x_user_id: str = Header()) -> CartResponse:
    command = UpdateCartItem(
        user_id=x_user_id,
        product_id=product_id,
        quantity=body.quantity,
        size=body.size,
    )
    cart_id = process_with_retry(command)
    return CartResponse(message="Cart updated successfully", data=cart_view(cart_id))


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(product_id: str, size: str | None = None, x_user_id: str = Header()) -> CartResponse:
    command = RemoveFromCart(user_id=x_user_id, product_id=product_id, size=size)
    cart_id = process_with_retry(command)
    return CartResponse(message="Product removed from cart", data=cart_view(cart_id))


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(x_user_id: str = Header()) -> CartResponse:
    cart_id = process_with_retry(ClearCart(user_id=x_user_id))
    return CartResponse(message="Cart cleared", data=cart_view(cart_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: PlaceOrderRequest, x_user_id: str = Header()) -> OrderResponse:
    """Check out the user's cart.

    Never retried here: a conflicting concurrent update comes back as 409
    and the client decides whether to try again.
    """
    order_id = place_order(
        user_id=x_user_id,
        shipping_address=body.shipping_address.model_dump() if body.shipping_address else None,
        payment_method=body.payment_method,
    )
    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse(message="Order created successfully", data=order_view(order))


@order_router.get("", response_model=OrderListResponse)
async def get_orders(x_user_id: str = Header()) -> OrderListResponse:
    return OrderListResponse(data=order_history(x_user_id))


@order_router.put("/{order_id}/payment-status", response_model=StatusResponse)
async def change_payment_status(order_id: str, body: PaymentStatusRequest, x_user_id: str = Header()) -> StatusResponse:
    command = ChangePaymentStatus(
        user_id=x_user_id,
        order_id=order_id,
        payment_status=body.payment_status,
    )
    status = process_with_retry(command)
    return StatusResponse(message=f"Payment status updated to {status}")


@order_router.put("/{order_id}/delivery-status", response_model=StatusResponse)
async def change_delivery_status(
    order_id: str, body: DeliveryStatusRequest, x_user_id: str = Header()
) -> StatusResponse:
    command = ChangeDeliveryStatus(
        user_id=x_user_id,
        order_id=order_id,
        delivery_status=body.delivery_status,
    )
    status = process_with_retry(command)
    return StatusResponse(message=f"Delivery status updated to {status}")
