"""Tests for the Cart aggregate — line merging, stock ceiling and total consistency."""

import pytest
from protean import atomic_change
from protean.exceptions import ValidationError
from store.cart.cart import Cart
from store.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartItemUpdated
from store.catalog.product import Product
from store.errors import CartLineNotFound, InsufficientStock, ProductNotFound, ProductUnavailable
from store.shared.money import line_total


def _make_cart():
    return Cart.create(user_id="user-001")


def _make_product(**overrides):
    defaults = {"name": "Linen Shirt", "price": 100.0, "stock": 10}
    defaults.update(overrides)
    return Product.create(**defaults)


def _assert_total_consistent(cart):
    assert cart.total_price == line_total(cart.items)


class TestCreate:
    def test_new_cart_is_empty(self):
        cart = _make_cart()
        assert cart.is_empty
        assert cart.total_price == 0.0
        assert cart.item_count == 0


class TestAddItem:
    def test_add_item_creates_line_with_price_snapshot(self):
        cart = _make_cart()
        product = _make_product(price=200.0, discount=10)
        cart.add_item(product, 2, "M")
        assert len(cart.items) == 1
        line = cart.items[0]
        assert line.quantity == 2
        assert line.size == "M"
        assert line.price == 180.0
        assert cart.total_price == 360.0

    def test_same_product_and_size_merges_quantity(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 2, "M")
        cart.add_item(product, 3, "M")
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        _assert_total_consistent(cart)

    def test_different_size_creates_new_line(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1, "M")
        cart.add_item(product, 1, "L")
        assert len(cart.items) == 2
        _assert_total_consistent(cart)

    def test_merged_line_keeps_original_price(self):
        cart = _make_cart()
        product = _make_product(price=100.0)
        cart.add_item(product, 1)
        with atomic_change(product):
            product.price = 150.0
            product.total_price = 150.0
        cart.add_item(product, 1)
        assert cart.items[0].price == 100.0
        assert cart.total_price == 200.0

    def test_quantity_must_be_positive(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.add_item(_make_product(), 0)

    def test_size_must_be_in_size_set(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.add_item(_make_product(), 1, "XXXL")

    def test_size_must_be_offered_by_product(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.add_item(_make_product(sizes=["S"]), 1, "L")

    def test_out_of_stock_product_is_rejected(self):
        cart = _make_cart()
        with pytest.raises(ProductUnavailable):
            cart.add_item(_make_product(stock=0), 1)

    def test_unavailable_product_is_rejected(self):
        cart = _make_cart()
        with pytest.raises(ProductUnavailable):
            cart.add_item(_make_product(availability=False), 1)

    def test_quantity_above_stock_is_rejected(self):
        cart = _make_cart()
        with pytest.raises(InsufficientStock):
            cart.add_item(_make_product(stock=3), 4)
        assert cart.is_empty

    def test_quantity_equal_to_stock_is_accepted(self):
        cart = _make_cart()
        cart.add_item(_make_product(stock=3), 3)
        assert cart.items[0].quantity == 3

    def test_merge_above_stock_is_rejected_and_line_unchanged(self):
        cart = _make_cart()
        product = _make_product(stock=3)
        cart.add_item(product, 2)
        with pytest.raises(InsufficientStock):
            cart.add_item(product, 2)
        assert cart.items[0].quantity == 2
        _assert_total_consistent(cart)

    def test_add_item_raises_event(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 2, "S")
        events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(events) == 1
        assert events[0].product_id == str(product.id)
        assert events[0].quantity == 2
        assert events[0].total_price == 200.0


class TestUpdateItem:
    def test_update_quantity(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1)
        cart.update_item(product.id, quantity=4, product=product)
        assert cart.items[0].quantity == 4
        assert cart.total_price == 400.0

    def test_zero_quantity_removes_line(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 2)
        cart.update_item(product.id, quantity=0)
        assert cart.is_empty
        assert cart.total_price == 0.0

    def test_decrease_does_not_need_product(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 3)
        cart.update_item(product.id, quantity=1, product=None)
        assert cart.items[0].quantity == 1

    def test_increase_for_missing_product_fails(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1)
        with pytest.raises(ProductNotFound):
            cart.update_item(product.id, quantity=2, product=None)

    def test_increase_above_stock_is_rejected(self):
        cart = _make_cart()
        product = _make_product(stock=2)
        cart.add_item(product, 1)
        with pytest.raises(InsufficientStock):
            cart.update_item(product.id, quantity=3, product=product)
        assert cart.items[0].quantity == 1

    def test_size_naming_existing_line_selects_it(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1, "S")
        cart.add_item(product, 1, "L")
        cart.update_item(product.id, quantity=3, size="L", product=product)
        by_size = {i.size: i.quantity for i in cart.items}
        assert by_size == {"S": 1, "L": 3}

    def test_new_size_resizes_first_line(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 2, "S")
        cart.update_item(product.id, size="M", product=product)
        assert cart.items[0].size == "M"
        assert cart.items[0].quantity == 2

    def test_unknown_product_line(self):
        cart = _make_cart()
        with pytest.raises(CartLineNotFound):
            cart.update_item("prod-missing", quantity=1)

    def test_update_raises_event(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1)
        cart._events.clear()
        cart.update_item(product.id, quantity=2, product=product)
        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, CartItemUpdated)
        assert event.previous_quantity == 1
        assert event.new_quantity == 2


class TestRemoveItem:
    def test_remove_item(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1)
        cart.remove_item(product.id)
        assert cart.is_empty
        assert cart.total_price == 0.0

    def test_remove_specific_size(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1, "S")
        cart.add_item(product, 2, "M")
        cart.remove_item(product.id, "M")
        assert [i.size for i in cart.items] == ["S"]
        _assert_total_consistent(cart)

    def test_remove_missing_line(self):
        cart = _make_cart()
        with pytest.raises(CartLineNotFound):
            cart.remove_item("prod-missing")

    def test_remove_raises_event(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1)
        cart._events.clear()
        cart.remove_item(product.id)
        assert isinstance(cart._events[0], CartItemRemoved)


class TestClear:
    def test_clear_empties_cart(self):
        cart = _make_cart()
        cart.add_item(_make_product(), 2)
        cart.add_item(_make_product(name="Wool Scarf", price=50.0), 1)
        cart.clear()
        assert cart.is_empty
        assert cart.total_price == 0.0

    def test_clear_is_idempotent(self):
        cart = _make_cart()
        cart.add_item(_make_product(), 1)
        cart.clear()
        cart._events.clear()
        cart.clear()
        assert cart.is_empty
        assert cart._events == []

    def test_clear_raises_event(self):
        cart = _make_cart()
        cart.add_item(_make_product(), 1)
        cart.clear(reason="checkout")
        events = [e for e in cart._events if isinstance(e, CartCleared)]
        assert events[0].lines_removed == 1
        assert events[0].reason == "checkout"


class TestTotalConsistency:
    def test_total_holds_after_every_mutation(self):
        cart = _make_cart()
        shirt = _make_product(price=120.0, discount=25)
        scarf = _make_product(name="Wool Scarf", price=45.0)

        cart.add_item(shirt, 2, "M")
        _assert_total_consistent(cart)
        cart.add_item(scarf, 3)
        _assert_total_consistent(cart)
        cart.add_item(shirt, 1, "M")
        _assert_total_consistent(cart)
        cart.update_item(scarf.id, quantity=1, product=scarf)
        _assert_total_consistent(cart)
        cart.remove_item(shirt.id, "M")
        _assert_total_consistent(cart)
        assert cart.total_price == 45.0

