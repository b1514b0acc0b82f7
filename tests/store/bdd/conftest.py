"""Shared BDD fixtures and step definitions for the store."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from store.account.user import User
from store.cart.cart import Cart
from store.cart.items import AddToCart
from store.cart.management import OpenCart
from store.catalog.product import Product


def _process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def error():
    """Container for the exception a When step ran into."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered shopper", target_fixture="shopper")
def a_registered_shopper(register_user):
    return register_user()


@given(parsers.cfparse('a product "{name}" priced {price:g} with {stock:d} in stock'))
def a_product(add_product, products, name, price, stock):
    products[name] = add_product(name=name, price=price, stock=stock)


@given(
    parsers.re(r'the shopper has (?P<qty>\d+) of "(?P<name>[^"]+)" in size "(?P<size>[^"]+)" in the cart'),
    converters={"qty": int},
)
def shopper_has_sized_line(shopper, products, qty, name, size):
    _process(AddToCart(user_id=shopper, product_id=products[name], quantity=qty, size=size))


@given(parsers.re(r'the shopper has (?P<qty>\d+) of "(?P<name>[^"]+)" in the cart'), converters={"qty": int})
def shopper_has_line(shopper, products, qty, name):
    _process(AddToCart(user_id=shopper, product_id=products[name], quantity=qty))


@given("the shopper has an empty cart")
def shopper_has_empty_cart(shopper):
    _process(OpenCart(user_id=shopper))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _cart(shopper):
    user = current_domain.repository_for(User).get(shopper)
    return current_domain.repository_for(Cart).get(user.cart_id)


@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_one_line(shopper, count):
    assert len(_cart(shopper).items) == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(shopper, count):
    user = current_domain.repository_for(User).get(shopper)
    if user.cart_id is None:
        assert count == 0
        return
    assert len(_cart(shopper).items) == count


@then(parsers.cfparse("the cart total is {total:g}"))
def cart_total_is(shopper, total):
    assert _cart(shopper).total_price == total


@then(parsers.cfparse('"{name}" has {stock:d} in stock and {sold:d} sold'))
def product_stock_and_sold(products, name, stock, sold):
    product = current_domain.repository_for(Product).get(products[name])
    assert product.stock == stock
    assert product.total_sold == sold


@then("the shopper has no orders")
def shopper_has_no_orders(shopper):
    assert current_domain.repository_for(User).get(shopper).order_id_list == []
