"""Domain events for the catalogue aggregates."""

from protean.fields import DateTime, Float, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    """Name, description, category, image, sizes or visibility of a product changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    is_active: String(required=True)  # serialized bool
    updated_at: DateTime(required=True)


@storefront.event(part_of="Variant")
class VariantAdded:
    """A purchasable colour/size combination was added to a product."""

    __version__ = 1

    variant_id: Identifier(required=True)
    product_id: Identifier(required=True)
    color: String(required=True)
    selling_price: Float(required=True)
    created_at: DateTime(required=True)
