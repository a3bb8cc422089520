"""Admin-driven order transitions — commands and handler.

The aggregate rejects illegal transitions before any stock moves. The stock
effect is applied next, under a per-transition ledger reference, and only
then is the order persisted: if the ledger refuses (not enough units to
deduct on completion) the order keeps its previous status.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.errors import OrderNotFound, VariantNotFound
from storefront.inventory import get_ledger
from storefront.ordering.order import Order, OrderStatus, StockEffect


@storefront.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    admin_id = String(max_length=100)
    admin_name = String(max_length=255)


@storefront.command(part_of="Order")
class RemoveOrder:
    order_id = Identifier(required=True)
    admin_id = String(max_length=100)
    admin_name = String(max_length=255)


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound(order_id) from None


def apply_stock_effect(order, effect):
    """Carry out the ledger side of a transition the order has just made."""
    ledger = get_ledger()
    reference = order.stock_reference()

    if effect == StockEffect.DEDUCT:
        ledger.reserve(order.variant_id, order.quantity, reference=reference)
    elif effect == StockEffect.RESTOCK:
        try:
            ledger.release(order.variant_id, order.quantity, reference=reference)
        except VariantNotFound:
            logger.warning(
                "Restock skipped, variant no longer exists",
                order_id=str(order.id),
                variant_id=str(order.variant_id),
                quantity=order.quantity,
            )


@storefront.command_handler(part_of=Order)
class OrderTransitionHandler:
    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        order = load_order(command.order_id)
        previous = order.status

        effect = order.transition_to(
            command.status,
            admin_id=command.admin_id,
            admin_name=command.admin_name,
        )
        apply_stock_effect(order, effect)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous,
            status=order.status,
            stock_effect=effect.value,
            admin_id=command.admin_id,
        )

    @handle(RemoveOrder)
    def remove_order(self, command):
        order = load_order(command.order_id)

        effect = order.remove(admin_id=command.admin_id, admin_name=command.admin_name)
        apply_stock_effect(order, effect)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order removed",
            order_id=str(order.id),
            stock_effect=effect.value,
            admin_id=command.admin_id,
        )
