"""Order history — a user's orders with product summaries resolved."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from store.errors import OrdersNotFound
from store.lookups import find_product, load_user
from store.order.order import Order


def _item_view(item, products):
    product_id = str(item.product_id)
    if product_id not in products:
        products[product_id] = find_product(product_id)
    product = products[product_id]
    return {
        "product_id": product_id,
        "quantity": item.quantity,
        "price": item.price,
        "size": item.size,
        "product": (
            {"name": product.name, "price": product.price, "images": product.image_list} if product else None
        ),
    }


def order_view(order, products=None):
    products = {} if products is None else products
    address = order.shipping_address
    return {
        "order_id": str(order.id),
        "user_id": str(order.user_id),
        "items": [_item_view(item, products) for item in order.items],
        "shipping_address": {
            "full_name": address.full_name,
            "phone": address.phone,
            "address": address.address,
            "city": address.city,
            "postal_code": address.postal_code,
            "country": address.country,
        },
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "delivery_status": order.delivery_status,
        "total_price": order.total_price,
        "is_paid": order.is_paid,
        "paid_at": order.paid_at,
        "is_delivered": order.is_delivered,
        "delivered_at": order.delivered_at,
        "created_at": order.created_at,
    }


def order_history(user_id):
    """The user's orders, newest first.

    Raises ``UserNotFound`` for an unknown user and ``OrdersNotFound`` when
    the user has not placed any order yet.
    """
    user = load_user(user_id)
    repo = current_domain.repository_for(Order)

    orders = []
    for order_id in user.order_id_list:
        try:
            orders.append(repo.get(order_id))
        except ObjectNotFoundError:
            continue
    if not orders:
        raise OrdersNotFound("No orders found for this user", user_id=str(user_id))

    orders.sort(key=lambda o: o.created_at, reverse=True)
    products = {}
    return [order_view(order, products) for order in orders]
