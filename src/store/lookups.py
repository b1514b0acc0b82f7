"""Repository lookups that translate missing records into store errors."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from store.account.user import User
from store.cart.cart import Cart
from store.catalog.product import Product
from store.errors import CartNotFound, ProductNotFound, UserNotFound


def load_user(user_id):
    try:
        return current_domain.repository_for(User).get(str(user_id))
    except ObjectNotFoundError as exc:
        raise UserNotFound(f"User not found: {user_id}", user_id=str(user_id)) from exc


def find_product(product_id):
    """The product, or ``None`` when it is not in the catalog."""
    if not product_id:
        return None
    try:
        return current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        return None


def load_product(product_id):
    product = find_product(product_id)
    if product is None:
        raise ProductNotFound(f"Product not found: {product_id}", product_id=str(product_id))
    return product


def find_cart(user):
    """The cart referenced by ``user``, or ``None`` if unset or dangling."""
    if not user.cart_id:
        return None
    try:
        return current_domain.repository_for(Cart).get(str(user.cart_id))
    except ObjectNotFoundError:
        return None


def load_cart(user):
    cart = find_cart(user)
    if cart is None:
        raise CartNotFound("Cart not found, please add a product to your cart first", user_id=str(user.id))
    return cart


def cart_for(user):
    """Return ``(cart, created)``, creating and attaching an empty cart when needed.

    The caller persists both the cart and the user when ``created`` is true.
    """
    cart = find_cart(user)
    if cart is not None:
        return cart, False

    cart = Cart.create(user_id=str(user.id))
    user.attach_cart(cart.id)
    return cart, True
