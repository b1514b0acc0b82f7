"""Store bounded context — catalog, accounts, shopping cart and checkout.

Cart, Order, User and Product aggregates live in one domain so that a single
Unit of Work can span all of them when a cart is checked out.
"""

from protean.domain import Domain

store = Domain(name="store")
