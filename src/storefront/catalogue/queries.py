"""Read-side queries over the catalogue, joined with live stock levels.

Customer-facing reads never include ``cost_price``; the admin reads do.
"""

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.catalogue.variant import Variant
from storefront.catalogue.variants import load_variant
from storefront.inventory import get_ledger


def _product_record(product, variant_count=None, total_stock=None):
    record = {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "category": product.category,
        "image_url": product.image_url,
        "available_sizes": product.sizes,
        "is_active": product.is_active,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }
    if variant_count is not None:
        record["variant_count"] = variant_count
        record["total_stock"] = total_stock
    return record


def _variant_record(variant, stock_quantity, include_cost=False):
    record = {
        "id": str(variant.id),
        "product_id": str(variant.product_id),
        "color": variant.color,
        "available_sizes": variant.sizes,
        "selling_price": variant.selling_price,
        "stock_quantity": stock_quantity,
        "image_url": variant.image_url,
    }
    if include_cost:
        record["cost_price"] = variant.cost_price
    return record


def _newest_first(records):
    return sorted(records, key=lambda r: r.created_at, reverse=True)


def variants_of(product_id) -> list[Variant]:
    repo = current_domain.repository_for(Variant)
    return repo._dao.query.filter(product_id=str(product_id)).all().items


def active_products(category=None) -> list[dict]:
    """Active products with at least one variant in stock, newest first.

    ``category`` of ``None`` or ``"all"`` lists every category.
    """
    products = current_domain.repository_for(Product)._dao.query.filter(is_active=True).all().items
    if category and category != "all":
        products = [p for p in products if p.category == category]

    ledger = get_ledger()
    listed = []
    for product in _newest_first(products):
        variants = variants_of(product.id)
        stock = ledger.levels([v.id for v in variants])
        if any(quantity > 0 for quantity in stock.values()):
            listed.append(_product_record(product))
    return listed


def all_products() -> list[dict]:
    """Every product, active or not, with variant counts for the admin list."""
    products = current_domain.repository_for(Product)._dao.query.all().items
    ledger = get_ledger()

    records = []
    for product in _newest_first(products):
        variants = variants_of(product.id)
        stock = ledger.levels([v.id for v in variants])
        records.append(_product_record(product, variant_count=len(variants), total_stock=sum(stock.values())))
    return records


def customer_variants(product_id) -> list[dict]:
    """In-stock variants of a product, ordered by colour."""
    variants = variants_of(product_id)
    stock = get_ledger().levels([v.id for v in variants])
    return [
        _variant_record(v, stock[str(v.id)])
        for v in sorted(variants, key=lambda v: v.color)
        if stock.get(str(v.id), 0) > 0
    ]


def admin_variants(product_id) -> list[dict]:
    """All variants of a product including cost price and empty ones."""
    variants = variants_of(product_id)
    stock = get_ledger().levels([v.id for v in variants])
    return [
        _variant_record(v, stock.get(str(v.id), 0), include_cost=True)
        for v in sorted(variants, key=lambda v: v.created_at, reverse=True)
    ]


def variant_stock(variant_id) -> dict:
    variant = load_variant(variant_id)
    level = get_ledger().level(variant.id)
    return {"id": str(variant.id), "color": variant.color, "stock_quantity": level.stock_quantity}
