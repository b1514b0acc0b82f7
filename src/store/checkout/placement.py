"""Order placement — converts a user's cart into an order in one Unit of Work.

Flow (every step is a hard gate):
    1. Resolve the user's cart                → CartNotFound
    2. Cart belongs to the requesting user    → Forbidden
    3. Cart lines are well formed             → InvalidCartState
    4. Shipping address and payment method    → InvalidOrderInput
    5. Current stock covers every product     → InsufficientStock
    6. Create the order from the cart lines
    7. Record the order on the user, sell stock on every product
    8. Empty the cart
    9. Commit

Steps 1-5 only read. Steps 6-8 mutate aggregates that the handler's Unit of
Work commits together, or not at all.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from store.account.user import User
from store.cart.cart import Cart
from store.catalog.product import Product
from store.checkout.validation import validate_cart_items, validate_order_input, verify_stock
from store.domain import store
from store.errors import CheckoutConflict, Forbidden, StoreError, TransactionAbortError
from store.lookups import load_cart, load_user
from store.order.order import Order

logger = structlog.get_logger(__name__)


@store.command(part_of="Order")
class PlaceOrder:
    """Check out the user's cart.

    Address and payment method are carried loosely typed so that checkout can
    report them in gate order rather than failing at command construction.
    """

    user_id = Identifier(required=True)
    shipping_address = Text()  # JSON object
    payment_method = String(max_length=50)


@store.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        user = load_user(command.user_id)
        cart = load_cart(user)

        if str(cart.user_id) != str(user.id):
            raise Forbidden("Unauthorized access to cart", user_id=str(user.id), cart_id=str(cart.id))

        lines = cart.snapshot()
        validate_cart_items(lines)
        address = validate_order_input(_decode(command.shipping_address), command.payment_method)
        reserved = verify_stock(lines)

        order = Order.create(
            user_id=str(user.id),
            items_data=lines,
            shipping_address=address,
            payment_method=command.payment_method,
        )
        user.record_order(order.id)
        for product, quantity in reserved.values():
            product.sell(quantity)
        cart.clear(reason="checkout")

        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(User).add(user)
        product_repo = current_domain.repository_for(Product)
        for product, _ in reserved.values():
            product_repo.add(product)
        current_domain.repository_for(Cart).add(cart)

        return str(order.id)


def _decode(shipping_address):
    if not shipping_address:
        return None
    try:
        return json.loads(shipping_address)
    except ValueError:
        return None


def place_order(user_id, shipping_address, payment_method):
    """Run checkout for ``user_id`` and return the new order id.

    Domain errors propagate unchanged. A version conflict on any aggregate
    surfaces as ``CheckoutConflict``; any other failure as
    ``TransactionAbortError``. Either way the Unit of Work has rolled back.
    """
    command = PlaceOrder(
        user_id=user_id,
        shipping_address=json.dumps(shipping_address) if shipping_address is not None else None,
        payment_method=payment_method,
    )
    try:
        order_id = current_domain.process(command, asynchronous=False)
    except (ValidationError, StoreError) as exc:
        logger.warning("Checkout aborted", user_id=str(user_id), reason=str(exc))
        raise
    except ExpectedVersionError as exc:
        logger.warning("Checkout aborted on concurrent update", user_id=str(user_id))
        raise CheckoutConflict(
            "The cart or a product changed while checking out, please try again",
            user_id=str(user_id),
        ) from exc
    except Exception as exc:
        logger.error("Checkout transaction failed", user_id=str(user_id), error=repr(exc))
        raise TransactionAbortError("Order could not be placed", user_id=str(user_id)) from exc

    logger.info("Order placed", user_id=str(user_id), order_id=order_id)
    return order_id
