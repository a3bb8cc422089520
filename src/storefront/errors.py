"""Error types shared by the ledger, the order lifecycle and the API layer.

All of them extend Protean's exceptions, so command handlers can raise them
directly and callers can keep catching ``ValidationError`` /
``ObjectNotFoundError`` where they do not care about the specific case.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InsufficientStock(ValidationError):
    """A reservation asked for more units than the variant has on hand."""

    def __init__(self, variant_id, requested, available):
        self.variant_id = str(variant_id)
        self.requested = requested
        self.available = available
        super().__init__({"quantity": [f"Only {available} available, {requested} requested"]})


class InvalidTransition(ValidationError):
    """An order was asked to move to a status its current status does not lead to."""

    def __init__(self, order_id, current, target):
        self.order_id = str(order_id)
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition order from {current} to {target}"]})


class _EntityNotFound(ObjectNotFoundError):
    """Not-found error that carries ``messages`` like a ValidationError does."""

    entity = "Object"

    def __init__(self, identifier):
        self.messages = {"_entity": f"{self.entity} not found"}
        super().__init__(self.messages)
        self.identifier = str(identifier)


class VariantNotFound(_EntityNotFound):
    entity = "Variant"

    @property
    def variant_id(self):
        return self.identifier


class ProductNotFound(_EntityNotFound):
    entity = "Product"

    @property
    def product_id(self):
        return self.identifier


class OrderNotFound(_EntityNotFound):
    entity = "Order"

    @property
    def order_id(self):
        return self.identifier
