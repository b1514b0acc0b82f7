"""User aggregate — the account data carts and checkout rely on.

Authentication, passwords and profile management are handled elsewhere. The
store only needs to know which cart belongs to a user and which orders the
user has placed.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String, Text, ValueObject

from store.account.events import CartAttached, OrderRecorded, UserRegistered
from store.domain import store
from store.shared.email import EmailAddress


@store.aggregate
class User:
    name: String(required=True, max_length=50)
    email: ValueObject(EmailAddress, required=True)
    cart_id: Identifier()
    order_ids: Text()  # JSON array of order ids, oldest first
    registered_at: DateTime()

    @classmethod
    def register(cls, name, email):
        now = datetime.now(UTC)
        user = cls(
            name=name,
            email=EmailAddress(address=email),
            order_ids=json.dumps([]),
            registered_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                name=name,
                email=email,
                registered_at=now,
            )
        )
        return user

    @property
    def order_id_list(self):
        return json.loads(self.order_ids) if self.order_ids else []

    def attach_cart(self, cart_id):
        self.cart_id = str(cart_id)
        self.raise_(CartAttached(user_id=str(self.id), cart_id=str(cart_id)))

    def record_order(self, order_id):
        """Append an order to the history; recording the same order twice is a no-op."""
        order_ids = self.order_id_list
        if str(order_id) in order_ids:
            return
        order_ids.append(str(order_id))
        self.order_ids = json.dumps(order_ids)
        self.raise_(OrderRecorded(user_id=str(self.id), order_id=str(order_id)))
