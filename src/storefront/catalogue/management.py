"""Product management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.catalogue.variant import Variant
from storefront.domain import logger, storefront
from storefront.errors import ProductNotFound
from storefront.inventory import get_ledger


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    description: Text()
    category: String(required=True, max_length=100)
    image_url: String(max_length=500)
    available_sizes: Text()  # JSON list
    is_active: Boolean(default=True)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    category: String(max_length=100)
    image_url: String(max_length=500)
    available_sizes: Text()  # JSON list
    is_active: Boolean()


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def load_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ProductNotFound(product_id) from None


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            description=command.description,
            category=command.category,
            image_url=command.image_url,
            available_sizes=command.available_sizes,
            is_active=command.is_active,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        product = load_product(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            category=command.category,
            image_url=command.image_url,
            available_sizes=command.available_sizes,
            is_active=command.is_active,
        )
        current_domain.repository_for(Product).add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        """Delete a product together with its variants and their stock rows."""
        product = load_product(command.product_id)

        variant_repo = current_domain.repository_for(Variant)
        variants = variant_repo._dao.query.filter(product_id=str(product.id)).all().items
        for variant in variants:
            variant_repo._dao.delete(variant)

        current_domain.repository_for(Product)._dao.delete(product)
        get_ledger().remove([variant.id for variant in variants])

        logger.info(
            "Product deleted",
            product_id=str(product.id),
            variants_removed=len(variants),
        )
