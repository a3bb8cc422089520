"""Domain events for the Order aggregate.

All events are versioned, immutable facts. They rebuild the aggregate via
@apply and feed the admin order list projection. Admin stamps are part of
the events themselves, so the audit trail is the event stream.
"""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order and its units were reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(required=True)
    size = String()
    color = String()
    quantity = Integer(required=True)
    phone_number = String(required=True)
    country = String()
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderConfirmed:
    """An admin confirmed a pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    admin_id = String(required=True)
    admin_name = String(required=True)
    confirmed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCompleted:
    """An admin approved a confirmed order; its units were deducted again."""

    __version__ = 1

    order_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)
    admin_id = String(required=True)
    admin_name = String(required=True)
    completed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """An order was cancelled. Cancelling a completed order is its deletion."""

    __version__ = 1

    order_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_status = String(required=True)
    restocked = String(required=True)  # serialized bool
    admin_id = String(required=True)
    admin_name = String(required=True)
    cancelled_at = DateTime(required=True)
