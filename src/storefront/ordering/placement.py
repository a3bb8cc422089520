"""Order placement — command and handler.

The order is fully built before the ledger is touched, so the only thing
that can follow a successful reservation is persisting the order itself.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.catalogue.variants import load_variant
from storefront.domain import logger, storefront
from storefront.inventory import get_ledger
from storefront.ordering.order import Order


@storefront.command(part_of="Order")
class PlaceOrder:
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    phone_number = String(required=True, max_length=30)
    product_id = Identifier()
    product_name = String(max_length=255)
    size = String(max_length=20)
    color = String(max_length=50)
    country = String(max_length=100)


def _product_name(product_id, fallback):
    if fallback:
        return fallback
    try:
        return current_domain.repository_for(Product).get(product_id).name
    except ObjectNotFoundError:
        return "Unknown product"


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        variant = load_variant(command.variant_id)

        if command.product_id and str(command.product_id) != str(variant.product_id):
            raise ValidationError({"product_id": ["Variant does not belong to this product"]})
        if command.size and not variant.offers_size(command.size):
            raise ValidationError({"size": [f"Size {command.size} is not available for this variant"]})

        order = Order.place(
            variant_id=variant.id,
            product_id=variant.product_id,
            product_name=_product_name(variant.product_id, command.product_name),
            quantity=command.quantity,
            phone_number=command.phone_number,
            size=command.size,
            color=command.color or variant.color,
            country=command.country,
        )

        level = get_ledger().reserve(variant.id, command.quantity, reference=order.stock_reference())
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            variant_id=str(variant.id),
            quantity=command.quantity,
            stock_remaining=level.stock_quantity,
        )
        return str(order.id)
