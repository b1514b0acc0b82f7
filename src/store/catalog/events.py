"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from store.domain import store


@store.event(part_of="Product")
class ProductAdded:
    """A product was listed with its initial price and stock."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    total_price: Float(required=True)
    stock: Integer(required=True)
    added_at: DateTime(required=True)


@store.event(part_of="Product")
class ProductSold:
    """Units of the product left stock as part of a placed order."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining_stock: Integer(required=True)
    total_sold: Integer(required=True)
    sold_at: DateTime(required=True)
