"""Product listing — command and handler."""

import json

from protean import handle
from protean.fields import Boolean, Float, Integer, String, Text
from protean.utils.globals import current_domain

from store.catalog.product import Product
from store.domain import store


@store.command(part_of="Product")
class AddProduct:
    name: String(required=True, max_length=50)
    description: String(max_length=200)
    price: Float(required=True, min_value=0.0)
    discount: Float(default=0.0, min_value=0.0, max_value=100.0)
    stock: Integer(required=True, min_value=0)
    images: Text()  # JSON list
    sizes: Text()  # JSON list
    availability: Boolean(default=True)


@store.command_handler(part_of=Product)
class AddProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            discount=command.discount,
            stock=command.stock,
            images=json.loads(command.images) if command.images else None,
            sizes=json.loads(command.sizes) if command.sizes else None,
            availability=command.availability,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)
