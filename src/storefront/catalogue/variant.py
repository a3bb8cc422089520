"""Variant aggregate — the unit of stock.

A variant belongs to exactly one product and carries both prices; the
cost price is only ever exposed on admin routes. Its stock count is not a
field here: it is owned by the stock ledger, keyed by the variant id.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.catalogue.product import decode_sizes, encode_sizes, validate_sizes
from storefront.domain import storefront


@storefront.aggregate
class Variant:
    product_id: Identifier(required=True)
    color: String(required=True, max_length=50)
    available_sizes: Text(default="[]")
    cost_price: Float(min_value=0.0, default=0.0)
    selling_price: Float(required=True, min_value=0.0)
    image_url: String(max_length=500)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def available_sizes_must_be_a_list(self):
        validate_sizes(self.available_sizes)

    @classmethod
    def create(cls, product_id, color, selling_price, cost_price=0.0, available_sizes=None, image_url=None):
        from storefront.catalogue.events import VariantAdded

        now = datetime.now(UTC)
        variant = cls(
            product_id=product_id,
            color=color,
            selling_price=selling_price,
            cost_price=cost_price or 0.0,
            available_sizes=encode_sizes(available_sizes),
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        variant.raise_(
            VariantAdded(
                variant_id=variant.id,
                product_id=product_id,
                color=color,
                selling_price=selling_price,
                created_at=now,
            )
        )
        return variant

    @property
    def sizes(self):
        return decode_sizes(self.available_sizes)

    def offers_size(self, size) -> bool:
        """An empty size list means the variant is one-size."""
        sizes = self.sizes
        return not sizes or size in sizes
