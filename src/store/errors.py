"""Error taxonomy for the store domain.

Input problems subclass Protean's ``ValidationError`` so they carry the same
``{"field": ["message"]}`` payload as field-level validation failures. The
remaining kinds share ``StoreError``, which the API layer maps to a status code.
"""

from protean.exceptions import ValidationError


class StoreError(Exception):
    """Base class for non-validation store errors."""

    status_code = 500

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    @property
    def messages(self):
        return {"_entity": [self.message]}


# ---------------------------------------------------------------------------
# Validation (400)
# ---------------------------------------------------------------------------
class InvalidCartState(ValidationError):
    """The cart cannot be checked out as it stands (empty or malformed items)."""


class InvalidOrderInput(ValidationError):
    """Shipping address or payment method supplied at checkout is malformed."""


class ProductUnavailable(ValidationError):
    """The product is out of stock or switched off for sale."""


class InsufficientStock(ValidationError):
    """Requested quantity exceeds the product's current stock."""

    def __init__(self, product_id, requested, available):
        self.product_id = str(product_id)
        self.requested = requested
        self.available = available
        super().__init__(
            {
                "stock": [
                    f"Insufficient stock for product: {self.product_id} "
                    f"(requested {requested}, available {available})"
                ]
            }
        )


# ---------------------------------------------------------------------------
# Not found (404)
# ---------------------------------------------------------------------------
class NotFoundError(StoreError):
    status_code = 404


class UserNotFound(NotFoundError):
    pass


class ProductNotFound(NotFoundError):
    pass


class CartNotFound(NotFoundError):
    pass


class CartLineNotFound(NotFoundError):
    pass


class OrderNotFound(NotFoundError):
    pass


class OrdersNotFound(NotFoundError):
    pass


# ---------------------------------------------------------------------------
# Authorization (403)
# ---------------------------------------------------------------------------
class Forbidden(StoreError):
    status_code = 403


# ---------------------------------------------------------------------------
# Transaction and storage (409 / 500)
# ---------------------------------------------------------------------------
class TransactionAbortError(StoreError):
    """The checkout unit of work was rolled back."""


class CheckoutConflict(TransactionAbortError):
    """A concurrent writer changed an aggregate the checkout depended on."""

    status_code = 409


class StorageError(StoreError):
    pass
