"""Order aggregate (Event Sourced) — the order lifecycle state machine.

Every status change is an event; the current state is rebuilt by replaying
them through the @apply methods. The aggregate decides which stock effect a
transition carries, the command handlers carry it out against the ledger.

State Machine:
    PENDING → CONFIRMED → COMPLETED → CANCELLED
    PENDING → CANCELLED
    CONFIRMED → CANCELLED

Stock effects:
    pending → cancelled      restock
    confirmed → completed    deduct (a second deduction on top of placement)
    completed → cancelled    restock, stamps deleted_by
"""

from datetime import UTC, datetime
from enum import Enum

from protean import apply
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.errors import InvalidTransition
from storefront.ordering.events import (
    OrderCancelled,
    OrderCompleted,
    OrderConfirmed,
    OrderPlaced,
)

UNKNOWN_ADMIN_ID = "unknown"
UNKNOWN_ADMIN_NAME = "Unknown Admin"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class StockEffect(Enum):
    NONE = "none"
    DEDUCT = "deduct"
    RESTOCK = "restock"


# (from, to) → stock effect. Anything not listed is rejected.
_TRANSITIONS = {
    (OrderStatus.PENDING, OrderStatus.CONFIRMED): StockEffect.NONE,
    (OrderStatus.PENDING, OrderStatus.CANCELLED): StockEffect.RESTOCK,
    (OrderStatus.CONFIRMED, OrderStatus.COMPLETED): StockEffect.DEDUCT,
    (OrderStatus.CONFIRMED, OrderStatus.CANCELLED): StockEffect.NONE,
    (OrderStatus.COMPLETED, OrderStatus.CANCELLED): StockEffect.RESTOCK,
}


def allowed_targets(status):
    """Statuses reachable from ``status`` in one transition."""
    current = OrderStatus(status)
    return [target for source, target in _TRANSITIONS if source == current]


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class AdminStamp:
    """Who performed an admin action on the order, and when."""

    admin_id = String(required=True, max_length=100)
    admin_name = String(required=True, max_length=255)
    stamped_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (Event Sourced)
# ---------------------------------------------------------------------------
@storefront.aggregate(is_event_sourced=True)
class Order:
    variant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    size = String(max_length=20)
    color = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    phone_number = String(required=True, max_length=30)
    country = String(max_length=100)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    approved_by = ValueObject(AdminStamp)
    deleted_by = ValueObject(AdminStamp)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        variant_id,
        product_id,
        product_name,
        quantity,
        phone_number,
        size=None,
        color=None,
        country=None,
    ):
        """Create a pending order from a customer's request.

        The snapshot of product name, size and colour is taken here and
        never re-read from the catalogue afterwards.
        """
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not phone_number:
            raise ValidationError({"phone_number": ["Phone number is required"]})

        order = cls._create_new()
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                variant_id=str(variant_id),
                product_id=str(product_id),
                product_name=product_name,
                size=size,
                color=color,
                quantity=quantity,
                phone_number=phone_number,
                country=country,
                placed_at=datetime.now(UTC),
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def transition_to(self, target, admin_id=None, admin_name=None) -> StockEffect:
        """Move the order to ``target`` and return the stock effect to apply.

        Raises InvalidTransition for any pair not in the transition table,
        including completed → completed and every move out of cancelled.
        """
        current = OrderStatus(self.status)
        try:
            target_status = OrderStatus(target.value if isinstance(target, OrderStatus) else target)
        except ValueError:
            raise InvalidTransition(self.id, current.value, target) from None

        effect = _TRANSITIONS.get((current, target_status))
        if effect is None:
            raise InvalidTransition(self.id, current.value, target_status.value)

        admin_id = admin_id or UNKNOWN_ADMIN_ID
        admin_name = admin_name or UNKNOWN_ADMIN_NAME
        now = datetime.now(UTC)

        if target_status == OrderStatus.CONFIRMED:
            self.raise_(
                OrderConfirmed(
                    order_id=str(self.id),
                    admin_id=admin_id,
                    admin_name=admin_name,
                    confirmed_at=now,
                )
            )
        elif target_status == OrderStatus.COMPLETED:
            self.raise_(
                OrderCompleted(
                    order_id=str(self.id),
                    variant_id=str(self.variant_id),
                    quantity=self.quantity,
                    admin_id=admin_id,
                    admin_name=admin_name,
                    completed_at=now,
                )
            )
        else:
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    variant_id=str(self.variant_id),
                    quantity=self.quantity,
                    previous_status=current.value,
                    restocked=str(effect == StockEffect.RESTOCK),
                    admin_id=admin_id,
                    admin_name=admin_name,
                    cancelled_at=now,
                )
            )
        return effect

    def remove(self, admin_id=None, admin_name=None) -> StockEffect:
        """Admin deletion: only a completed order can be removed.

        Removal is the completed → cancelled transition; it restocks and
        stamps deleted_by.
        """
        if OrderStatus(self.status) != OrderStatus.COMPLETED:
            raise InvalidTransition(self.id, self.status, "deleted")
        return self.transition_to(OrderStatus.CANCELLED, admin_id=admin_id, admin_name=admin_name)

    def stock_reference(self) -> str:
        """Ledger reference of the stock effect of the current status."""
        return f"{self.id}:{self.status}"

    # -------------------------------------------------------------------
    # @apply methods: rebuild state during event replay
    # -------------------------------------------------------------------
    @apply
    def _on_order_placed(self, event: OrderPlaced):
        self.id = event.order_id
        self.variant_id = event.variant_id
        self.product_id = event.product_id
        self.product_name = event.product_name
        self.size = event.size
        self.color = event.color
        self.quantity = event.quantity
        self.phone_number = event.phone_number
        self.country = event.country
        self.status = OrderStatus.PENDING.value
        self.created_at = event.placed_at
        self.updated_at = event.placed_at

    @apply
    def _on_order_confirmed(self, event: OrderConfirmed):
        self.status = OrderStatus.CONFIRMED.value
        self.updated_at = event.confirmed_at

    @apply
    def _on_order_completed(self, event: OrderCompleted):
        self.status = OrderStatus.COMPLETED.value
        self.approved_by = AdminStamp(
            admin_id=event.admin_id,
            admin_name=event.admin_name,
            stamped_at=event.completed_at,
        )
        self.updated_at = event.completed_at

    @apply
    def _on_order_cancelled(self, event: OrderCancelled):
        self.status = OrderStatus.CANCELLED.value
        if event.previous_status == OrderStatus.COMPLETED.value:
            self.deleted_by = AdminStamp(
                admin_id=event.admin_id,
                admin_name=event.admin_name,
                stamped_at=event.cancelled_at,
            )
        self.updated_at = event.cancelled_at
