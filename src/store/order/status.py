"""Order status management — payment and delivery transitions."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from store.domain import store
from store.errors import Forbidden, OrderNotFound
from store.order.order import Order

logger = structlog.get_logger(__name__)


@store.command(part_of="Order")
class ChangePaymentStatus:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)


@store.command(part_of="Order")
class ChangeDeliveryStatus:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    delivery_status = String(required=True, max_length=20)


def _owned_order(repo, order_id, user_id):
    try:
        order = repo.get(str(order_id))
    except ObjectNotFoundError as exc:
        raise OrderNotFound(f"Order not found: {order_id}", order_id=str(order_id)) from exc
    if str(order.user_id) != str(user_id):
        raise Forbidden("You are not allowed to change this order", order_id=str(order_id))
    return order


@store.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(ChangePaymentStatus)
    def change_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = _owned_order(repo, command.order_id, command.user_id)
        order.change_payment_status(command.payment_status)
        repo.add(order)
        logger.info("Payment status changed", order_id=str(order.id), payment_status=order.payment_status)
        return order.payment_status

    @handle(ChangeDeliveryStatus)
    def change_delivery_status(self, command):
        repo = current_domain.repository_for(Order)
        order = _owned_order(repo, command.order_id, command.user_id)
        order.change_delivery_status(command.delivery_status)
        repo.add(order)
        logger.info("Delivery status changed", order_id=str(order.id), delivery_status=order.delivery_status)
        return order.delivery_status
