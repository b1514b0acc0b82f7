"""Cart item management — commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from store.account.user import User
from store.cart.cart import Cart
from store.domain import store
from store.lookups import cart_for, find_product, load_cart, load_product, load_user

logger = structlog.get_logger(__name__)


@store.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)
    size = String(max_length=10)


@store.command(part_of="Cart")
class UpdateCartItem:
    """Change a line's quantity or size. A quantity of 0 removes the line."""

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer()
    size = String(max_length=10)


@store.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String(max_length=10)


@store.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        user = load_user(command.user_id)
        cart, created = cart_for(user)
        product = load_product(command.product_id)

        cart.add_item(product, quantity=command.quantity, size=command.size)

        current_domain.repository_for(Cart).add(cart)
        if created:
            current_domain.repository_for(User).add(user)

        logger.info(
            "Product added to cart",
            cart_id=str(cart.id),
            product_id=str(product.id),
            quantity=command.quantity,
            size=command.size,
        )
        return str(cart.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        user = load_user(command.user_id)
        cart = load_cart(user)
        cart.update_item(
            product_id=command.product_id,
            quantity=command.quantity,
            size=command.size,
            product=find_product(command.product_id),
        )
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        user = load_user(command.user_id)
        cart = load_cart(user)
        cart.remove_item(product_id=command.product_id, size=command.size)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)
