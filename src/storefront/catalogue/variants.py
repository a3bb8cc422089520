"""Variant management — commands and handler.

Variants are created in the catalogue and registered with the stock
ledger in the same step; stock edits after that go through the ledger
only.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.management import load_product
from storefront.catalogue.variant import Variant
from storefront.domain import logger, storefront
from storefront.errors import VariantNotFound
from storefront.inventory import get_ledger

DEFAULT_INITIAL_STOCK = 10


@storefront.command(part_of="Variant")
class AddVariant:
    product_id: Identifier(required=True)
    color: String(required=True, max_length=50)
    available_sizes: Text()  # JSON list
    cost_price: Float(min_value=0.0, default=0.0)
    selling_price: Float(required=True, min_value=0.0)
    stock_quantity: Integer(min_value=0, default=DEFAULT_INITIAL_STOCK)
    image_url: String(max_length=500)


@storefront.command(part_of="Variant")
class RemoveVariant:
    variant_id: Identifier(required=True)


@storefront.command(part_of="Variant")
class SetVariantStock:
    variant_id: Identifier(required=True)
    stock_quantity: Integer(required=True, min_value=0)


def load_variant(variant_id) -> Variant:
    try:
        return current_domain.repository_for(Variant).get(variant_id)
    except ObjectNotFoundError:
        raise VariantNotFound(variant_id) from None


@storefront.command_handler(part_of=Variant)
class ManageVariantHandler:
    @handle(AddVariant)
    def add_variant(self, command):
        product = load_product(command.product_id)

        variant = Variant.create(
            product_id=str(product.id),
            color=command.color,
            selling_price=command.selling_price,
            cost_price=command.cost_price,
            available_sizes=command.available_sizes,
            image_url=command.image_url,
        )
        current_domain.repository_for(Variant).add(variant)

        stock = command.stock_quantity if command.stock_quantity is not None else DEFAULT_INITIAL_STOCK
        get_ledger().register(variant.id, stock)
        return str(variant.id)

    @handle(RemoveVariant)
    def remove_variant(self, command):
        variant = load_variant(command.variant_id)
        current_domain.repository_for(Variant)._dao.delete(variant)
        get_ledger().remove([variant.id])
        logger.info("Variant removed", variant_id=str(variant.id), product_id=str(variant.product_id))

    @handle(SetVariantStock)
    def set_variant_stock(self, command):
        variant = load_variant(command.variant_id)
        get_ledger().set_level(variant.id, command.stock_quantity)
