"""Admin order list — one row per order with its audit stamps."""

from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.events import (
    OrderCancelled,
    OrderCompleted,
    OrderConfirmed,
    OrderPlaced,
)
from storefront.ordering.order import Order, OrderStatus


@storefront.projection
class AdminOrder:
    order_id = Identifier(identifier=True, required=True)
    variant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(required=True)
    size = String()
    color = String()
    quantity = Integer(required=True)
    phone_number = String(required=True)
    country = String()
    status = String(required=True)
    approved_by_id = String()
    approved_by_name = String()
    approved_at = DateTime()
    deleted_by_id = String()
    deleted_by_name = String()
    deleted_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()


@storefront.projector(projector_for=AdminOrder, aggregates=[Order])
class AdminOrderProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        current_domain.repository_for(AdminOrder).add(
            AdminOrder(
                order_id=event.order_id,
                variant_id=event.variant_id,
                product_id=event.product_id,
                product_name=event.product_name,
                size=event.size,
                color=event.color,
                quantity=event.quantity,
                phone_number=event.phone_number,
                country=event.country,
                status=OrderStatus.PENDING.value,
                created_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    @on(OrderConfirmed)
    def on_order_confirmed(self, event):
        repo = current_domain.repository_for(AdminOrder)
        record = repo.get(event.order_id)
        record.status = OrderStatus.CONFIRMED.value
        record.updated_at = event.confirmed_at
        repo.add(record)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        repo = current_domain.repository_for(AdminOrder)
        record = repo.get(event.order_id)
        record.status = OrderStatus.COMPLETED.value
        record.approved_by_id = event.admin_id
        record.approved_by_name = event.admin_name
        record.approved_at = event.completed_at
        record.updated_at = event.completed_at
        repo.add(record)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        repo = current_domain.repository_for(AdminOrder)
        record = repo.get(event.order_id)
        record.status = OrderStatus.CANCELLED.value
        if event.previous_status == OrderStatus.COMPLETED.value:
            record.deleted_by_id = event.admin_id
            record.deleted_by_name = event.admin_name
            record.deleted_at = event.cancelled_at
        record.updated_at = event.cancelled_at
        repo.add(record)
