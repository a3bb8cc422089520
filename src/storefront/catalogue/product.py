"""Product aggregate — catalogue metadata shown to customers."""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, Text

from storefront.domain import storefront


def encode_sizes(sizes):
    """Store a list of sizes as the JSON text the aggregates keep."""
    if sizes is None:
        return "[]"
    if isinstance(sizes, str):
        return sizes
    return json.dumps(list(sizes))


def decode_sizes(raw):
    if not raw:
        return []
    return json.loads(raw)


def validate_sizes(raw):
    try:
        sizes = json.loads(raw) if raw else []
    except (json.JSONDecodeError, TypeError):
        raise ValidationError({"available_sizes": ["Available sizes must be valid JSON"]}) from None

    if not isinstance(sizes, list) or not all(isinstance(size, str) for size in sizes):
        raise ValidationError({"available_sizes": ["Available sizes must be a list of strings"]})


@storefront.aggregate
class Product:
    """A product listed in the storefront. Stock lives on its variants."""

    name: String(required=True, max_length=255)
    description: Text()
    category: String(required=True, max_length=100)
    image_url: String(max_length=500)
    available_sizes: Text(default="[]")
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def available_sizes_must_be_a_list(self):
        validate_sizes(self.available_sizes)

    @classmethod
    def create(cls, name, category, description=None, image_url=None, available_sizes=None, is_active=True):
        from storefront.catalogue.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            name=name,
            category=category,
            description=description,
            image_url=image_url,
            available_sizes=encode_sizes(available_sizes),
            is_active=True if is_active is None else is_active,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                category=category,
                created_at=now,
            )
        )
        return product

    @property
    def sizes(self):
        return decode_sizes(self.available_sizes)

    def update_details(
        self,
        name=None,
        description=None,
        category=None,
        image_url=None,
        available_sizes=None,
        is_active=None,
    ):
        """Apply a partial update; ``None`` leaves a field untouched."""
        from storefront.catalogue.events import ProductDetailsUpdated

        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if category is not None:
            self.category = category
        if image_url is not None:
            self.image_url = image_url
        if available_sizes is not None:
            self.available_sizes = encode_sizes(available_sizes)
        if is_active is not None:
            self.is_active = is_active

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                category=self.category,
                is_active=str(self.is_active),
                updated_at=now,
            )
        )
