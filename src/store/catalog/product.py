"""Product aggregate — the slice of the catalog the cart and checkout depend on.

Catalog management (categories, media upload, search) lives outside this
service. Here a product only needs what carts and orders read (price, discount,
stock, availability, sizes, display summary) and what checkout writes (stock
decrement and sold count).
"""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from store.catalog.events import ProductAdded, ProductSold
from store.domain import store
from store.errors import InsufficientStock
from store.shared.money import discounted_price, same_amount
from store.shared.sizes import ALLOWED_SIZES


@store.aggregate
class Product:
    """A sellable item with a single stock counter shared by all its sizes."""

    name: String(required=True, max_length=50)
    description: String(max_length=200)
    images: Text()  # JSON: list of image URLs
    price: Float(required=True, min_value=0.0)
    discount: Float(default=0.0, min_value=0.0, max_value=100.0)
    total_price: Float(min_value=0.0)
    stock: Integer(required=True, min_value=0)
    total_sold: Integer(default=0, min_value=0)
    availability: Boolean(default=True)
    sizes: Text()  # JSON: list of sizes from the fixed size set
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def total_price_reflects_discount(self):
        if self.total_price is None:
            return
        if not same_amount(self.total_price, discounted_price(self.price, self.discount)):
            raise ValidationError({"total_price": ["Total price must equal price less discount"]})

    @invariant.post
    def out_of_stock_product_is_unavailable(self):
        if self.stock == 0 and self.availability:
            raise ValidationError({"availability": ["A product with no stock cannot be available"]})

    @invariant.post
    def sizes_must_be_known(self):
        unknown = [s for s in self.size_list if s not in ALLOWED_SIZES]
        if unknown:
            raise ValidationError({"sizes": [f"Unknown sizes: {', '.join(unknown)}"]})

    @classmethod
    def create(
        cls,
        name,
        price,
        stock,
        discount=0.0,
        description=None,
        images=None,
        sizes=None,
        availability=True,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            images=json.dumps(list(images or [])),
            price=price,
            discount=discount or 0.0,
            total_price=discounted_price(price, discount),
            stock=stock,
            availability=bool(availability) and stock > 0,
            sizes=json.dumps(list(sizes or [])),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                total_price=product.total_price,
                stock=product.stock,
                added_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def image_list(self):
        return json.loads(self.images) if self.images else []

    @property
    def size_list(self):
        return json.loads(self.sizes) if self.sizes else []

    @property
    def is_purchasable(self):
        return bool(self.availability) and self.stock > 0

    def offers_size(self, size):
        """Products that declare no sizes accept any size from the fixed set."""
        sizes = self.size_list
        return size is None or not sizes or size in sizes

    def summary(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "price": self.price,
            "total_price": self.total_price,
            "images": self.image_list,
        }

    # -------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------
    def sell(self, quantity):
        """Take ``quantity`` units out of stock; refuses to go below zero."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity sold must be at least 1"]})
        if self.stock < quantity:
            raise InsufficientStock(self.id, requested=quantity, available=self.stock)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.stock = self.stock - quantity
            self.total_sold = (self.total_sold or 0) + quantity
            if self.stock == 0:
                self.availability = False
            self.updated_at = now

        self.raise_(
            ProductSold(
                product_id=str(self.id),
                quantity=quantity,
                remaining_stock=self.stock,
                total_sold=self.total_sold,
                sold_at=now,
            )
        )
