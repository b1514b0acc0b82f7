"""Cart management — opening a user's cart and clearing it."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from store.account.user import User
from store.cart.cart import Cart
from store.domain import store
from store.lookups import cart_for, load_cart, load_user

logger = structlog.get_logger(__name__)


@store.command(part_of="Cart")
class OpenCart:
    """Return the user's cart, creating and linking an empty one on first use."""

    user_id = Identifier(required=True)


@store.command(part_of="Cart")
class ClearCart:
    """Remove every line from the user's cart."""

    user_id = Identifier(required=True)


@store.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(OpenCart)
    def open_cart(self, command):
        user = load_user(command.user_id)
        cart, created = cart_for(user)
        if created:
            current_domain.repository_for(Cart).add(cart)
            current_domain.repository_for(User).add(user)
            logger.info("Opened cart", user_id=str(user.id), cart_id=str(cart.id))
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        user = load_user(command.user_id)
        cart = load_cart(user)
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)
