"""Cart read model — lines with current product details resolved."""

from protean.utils.globals import current_domain

from store.cart.cart import Cart
from store.lookups import find_product


def cart_view(cart_id):
    cart = current_domain.repository_for(Cart).get(str(cart_id))
    items = []
    for line in cart.items:
        product = find_product(line.product_id)
        items.append(
            {
                "item_id": str(line.id),
                "product_id": str(line.product_id),
                "quantity": line.quantity,
                "size": line.size,
                "price": line.price,
                "product": (
                    {
                        "name": product.name,
                        "images": product.image_list,
                        "total_price": product.total_price,
                        "stock": product.stock,
                        "availability": product.availability,
                    }
                    if product
                    else None
                ),
            }
        )
    return {
        "cart_id": str(cart.id),
        "user_id": str(cart.user_id),
        "items": items,
        "total_price": cart.total_price,
        "item_count": cart.item_count,
    }
