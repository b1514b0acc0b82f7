"""Cart aggregate — one per user, holds priced lines and a derived total.

Line prices are snapshots of the product's total price at the moment the line
was created; they are never refreshed from the live catalog. Every mutator
recalculates ``total_price`` inside the same atomic change as the item
mutation, so the invariant below always holds once the change is applied.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from store.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartItemUpdated
from store.domain import store
from store.errors import CartLineNotFound, InsufficientStock, ProductNotFound, ProductUnavailable
from store.shared.money import line_total, same_amount
from store.shared.sizes import Size, is_valid_size


@store.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    size = String(choices=Size)
    price = Float(required=True, min_value=0.0)  # snapshot at add-time
    added_at = DateTime()


@store.aggregate
class Cart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    total_price = Float(default=0.0, min_value=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_price_matches_items(self):
        if not same_amount(self.total_price, line_total(self.items)):
            raise ValidationError({"total_price": ["Cart total must equal the sum of its lines"]})

    @invariant.post
    def one_line_per_product_and_size(self):
        keys = [(str(i.product_id), i.size) for i in self.items]
        if len(keys) != len(set(keys)):
            raise ValidationError({"items": ["A product and size can appear on only one cart line"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            total_price=0.0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def item_count(self):
        """Number of units across all lines."""
        return sum(i.quantity for i in self.items)

    @property
    def is_empty(self):
        return not self.items

    def line_for(self, product_id, size=None):
        """The exact (product, size) line, else the first line for the product."""
        lines = [i for i in self.items if str(i.product_id) == str(product_id)]
        if size is not None:
            exact = next((i for i in lines if i.size == size), None)
            if exact is not None:
                return exact
        return lines[0] if lines else None

    def _exact_line(self, product_id, size):
        return next(
            (i for i in self.items if str(i.product_id) == str(product_id) and i.size == size),
            None,
        )

    def _recalculate_total(self):
        self.total_price = line_total(self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity, size=None):
        """Add ``quantity`` units of ``product`` in ``size``, merging into an existing line."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive number"]})
        if not is_valid_size(size):
            raise ValidationError({"size": [f"Invalid size: {size}"]})
        if not product.is_purchasable:
            raise ProductUnavailable({"product_id": [f"Product is out of stock or unavailable: {product.id}"]})
        if not product.offers_size(size):
            raise ValidationError({"size": [f"Size {size} is not offered for product: {product.id}"]})

        existing = self._exact_line(product.id, size)
        line_quantity = quantity + (existing.quantity if existing else 0)
        if line_quantity > product.stock:
            raise InsufficientStock(product.id, requested=line_quantity, available=product.stock)

        now = datetime.now(UTC)
        with atomic_change(self):
            if existing:
                existing.quantity = line_quantity
                line = existing
            else:
                line = CartItem(
                    product_id=str(product.id),
                    quantity=quantity,
                    size=size,
                    price=product.total_price,
                    added_at=now,
                )
                self.add_items(line)
            self._recalculate_total()
            self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(line.id),
                product_id=str(product.id),
                size=size,
                quantity=quantity,
                line_quantity=line_quantity,
                price=line.price,
                total_price=self.total_price,
            )
        )

    def update_item(self, product_id, quantity=None, size=None, product=None):
        """Change quantity and/or size of a line; quantity 0 removes the line.

        ``product`` is the current catalog entry, needed when the quantity
        grows or the size changes. Pass ``None`` if the product no longer exists.
        """
        if quantity is not None and quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})
        if not is_valid_size(size):
            raise ValidationError({"size": [f"Invalid size: {size}"]})

        line = self.line_for(product_id, size)
        if line is None:
            raise CartLineNotFound(f"Product not found in cart: {product_id}", product_id=str(product_id))

        if quantity == 0:
            self._drop_line(line)
            return

        new_quantity = quantity if quantity is not None else line.quantity
        new_size = size if size is not None else line.size
        growing = new_quantity > line.quantity
        resizing = new_size != line.size

        if growing or resizing:
            if product is None:
                raise ProductNotFound(f"Product not found: {product_id}", product_id=str(product_id))
            if resizing and not product.offers_size(new_size):
                raise ValidationError({"size": [f"Size {new_size} is not offered for product: {product_id}"]})
            if growing and new_quantity > product.stock:
                raise InsufficientStock(product_id, requested=new_quantity, available=product.stock)

        previous_quantity, previous_size = line.quantity, line.size
        with atomic_change(self):
            line.quantity = new_quantity
            line.size = new_size
            self._recalculate_total()
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemUpdated(
                cart_id=str(self.id),
                item_id=str(line.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                previous_size=previous_size,
                new_size=new_size,
                total_price=self.total_price,
            )
        )

    def remove_item(self, product_id, size=None):
        line = self.line_for(product_id, size)
        if line is None:
            raise CartLineNotFound(f"Product not found in cart: {product_id}", product_id=str(product_id))
        self._drop_line(line)

    def _drop_line(self, line):
        with atomic_change(self):
            self.remove_items(line)
            self._recalculate_total()
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(line.id),
                product_id=str(line.product_id),
                size=line.size,
                total_price=self.total_price,
            )
        )

    def clear(self, reason="user"):
        """Remove every line and zero the total. Clearing an empty cart changes nothing."""
        if self.is_empty:
            return

        lines = list(self.items)
        with atomic_change(self):
            for line in lines:
                self.remove_items(line)
            self._recalculate_total()
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                lines_removed=len(lines),
                reason=reason,
            )
        )

    # -------------------------------------------------------------------
    # Checkout snapshot
    # -------------------------------------------------------------------
    def snapshot(self):
        """Plain copies of the current lines, as consumed by order creation."""
        return [
            {
                "product_id": str(i.product_id) if i.product_id else None,
                "quantity": i.quantity,
                "price": i.price,
                "size": i.size,
            }
            for i in self.items
        ]
