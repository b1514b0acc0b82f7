"""Domain events for the Cart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from store.domain import store


@store.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or an existing line grew."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String()
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)
    price = Float(required=True)
    total_price = Float(required=True)


@store.event(part_of="Cart")
class CartItemUpdated:
    """The quantity or size of a cart line was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    previous_size = String()
    new_size = String()
    total_price = Float(required=True)


@store.event(part_of="Cart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String()
    total_price = Float(required=True)


@store.event(part_of="Cart")
class CartCleared:
    """All lines were removed, either by the user or by a completed checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)
    reason = String(max_length=20)
