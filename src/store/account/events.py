"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from store.domain import store


@store.event(part_of="User")
class UserRegistered:
    """A user account became known to the store."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    registered_at: DateTime(required=True)


@store.event(part_of="User")
class CartAttached:
    """The user's cart reference was set (on first cart access)."""

    __version__ = 1

    user_id: Identifier(required=True)
    cart_id: Identifier(required=True)


@store.event(part_of="User")
class OrderRecorded:
    """A placed order was appended to the user's order history."""

    __version__ = 1

    user_id: Identifier(required=True)
    order_id: Identifier(required=True)
