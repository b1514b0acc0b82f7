"""BDD tests for the shopping cart."""

from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when
from store.account.user import User
from store.cart.cart import Cart
from store.cart.items import AddToCart, UpdateCartItem
from store.cart.management import ClearCart
from store.errors import InsufficientStock

scenarios("features/cart.feature")


def _process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the shopper adds {qty:d} of "{name}" in size "{size}"'))
def shopper_adds(shopper, products, qty, name, size, error):
    try:
        _process(AddToCart(user_id=shopper, product_id=products[name], quantity=qty, size=size))
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the shopper changes "{name}" to quantity {qty:d}'))
def shopper_changes_quantity(shopper, products, name, qty):
    _process(UpdateCartItem(user_id=shopper, product_id=products[name], quantity=qty))


@when("the shopper clears the cart")
def shopper_clears_cart(shopper):
    _process(ClearCart(user_id=shopper))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the "{name}" line in size "{size}" has quantity {qty:d}'))
def line_has_quantity(shopper, products, name, size, qty):
    user = current_domain.repository_for(User).get(shopper)
    cart = current_domain.repository_for(Cart).get(user.cart_id)
    line = next(i for i in cart.items if str(i.product_id) == products[name] and i.size == size)
    assert line.quantity == qty


@then("the request fails with insufficient stock")
def request_fails_with_insufficient_stock(error):
    assert isinstance(error["exc"], InsufficientStock)
