"""Tests for the Product and Variant aggregates."""

import json

import pytest
from protean.exceptions import ValidationError
from storefront.catalogue.events import ProductCreated, ProductDetailsUpdated, VariantAdded
from storefront.catalogue.product import Product
from storefront.catalogue.variant import Variant


def _make_product(**overrides):
    defaults = {
        "name": "Linen Shirt",
        "category": "shirts",
        "description": "Breathable summer shirt",
        "available_sizes": ["S", "M", "L"],
    }
    defaults.update(overrides)
    return Product.create(**defaults)


def _make_variant(**overrides):
    defaults = {
        "product_id": "prod-001",
        "color": "Navy",
        "selling_price": 45.0,
        "cost_price": 20.0,
        "available_sizes": ["M", "L"],
    }
    defaults.update(overrides)
    return Variant.create(**defaults)


class TestProduct:
    def test_create_product(self):
        product = _make_product()
        assert product.name == "Linen Shirt"
        assert product.is_active is True
        assert product.sizes == ["S", "M", "L"]
        assert product.created_at is not None

    def test_create_raises_product_created(self):
        product = _make_product()
        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, ProductCreated)
        assert event.product_id == product.id
        assert event.category == "shirts"

    def test_sizes_default_to_empty_list(self):
        product = _make_product(available_sizes=None)
        assert product.available_sizes == "[]"
        assert product.sizes == []

    def test_sizes_must_be_json_list(self):
        with pytest.raises(ValidationError) as exc_info:
            _make_product(available_sizes='{"size": "M"}')
        assert "available_sizes" in exc_info.value.messages

    def test_sizes_must_be_valid_json(self):
        with pytest.raises(ValidationError) as exc_info:
            _make_product(available_sizes="[S, M")
        assert "available_sizes" in exc_info.value.messages

    def test_name_required(self):
        with pytest.raises(ValidationError) as exc_info:
            _make_product(name=None)
        assert "name" in exc_info.value.messages

    def test_partial_update_keeps_untouched_fields(self):
        product = _make_product()
        product._events.clear()

        product.update_details(name="Linen Shirt II", is_active=False)

        assert product.name == "Linen Shirt II"
        assert product.category == "shirts"
        assert product.description == "Breathable summer shirt"
        assert product.is_active is False

    def test_update_raises_details_updated(self):
        product = _make_product()
        product._events.clear()

        product.update_details(available_sizes=["XL"])

        assert product.sizes == ["XL"]
        event = product._events[0]
        assert isinstance(event, ProductDetailsUpdated)
        assert event.is_active == "True"


class TestVariant:
    def test_create_variant(self):
        variant = _make_variant()
        assert variant.color == "Navy"
        assert variant.sizes == ["M", "L"]
        assert variant.cost_price == 20.0

    def test_create_raises_variant_added(self):
        variant = _make_variant()
        event = variant._events[0]
        assert isinstance(event, VariantAdded)
        assert event.variant_id == variant.id
        assert event.selling_price == 45.0

    def test_selling_price_cannot_be_negative(self):
        with pytest.raises(ValidationError) as exc_info:
            _make_variant(selling_price=-1.0)
        assert "selling_price" in exc_info.value.messages

    def test_sizes_must_be_strings(self):
        with pytest.raises(ValidationError) as exc_info:
            _make_variant(available_sizes=json.dumps([38, 39]))
        assert "available_sizes" in exc_info.value.messages

    def test_offers_listed_size_only(self):
        variant = _make_variant()
        assert variant.offers_size("M")
        assert not variant.offers_size("S")

    def test_one_size_variant_offers_any_size(self):
        variant = _make_variant(available_sizes=[])
        assert variant.offers_size("M")
