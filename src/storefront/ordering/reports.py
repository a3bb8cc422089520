"""Admin reports — the enriched order list and the dashboard figures.

Prices are read from the live variant at report time, as the admin
dashboard always has; an order whose variant was deleted reports zero
cost and price.
"""

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.catalogue.variant import Variant
from storefront.inventory import get_ledger
from storefront.ordering.order import OrderStatus, allowed_targets
from storefront.ordering.projections.admin_orders import AdminOrder

LOW_STOCK_THRESHOLD = 5

_OPEN_STATUSES = {OrderStatus.PENDING.value, OrderStatus.CONFIRMED.value}


def _variants_by_id():
    variants = current_domain.repository_for(Variant)._dao.query.all().items
    return {str(v.id): v for v in variants}


def _stamp(admin_id, admin_name, at):
    if admin_id is None:
        return None
    return {"admin_id": admin_id, "admin_name": admin_name, "timestamp": at}


def admin_order_rows() -> list[dict]:
    """All orders, newest first, with cost, price and profit per order."""
    orders = current_domain.repository_for(AdminOrder)._dao.query.all().items
    variants = _variants_by_id()

    rows = []
    for order in sorted(orders, key=lambda o: o.created_at, reverse=True):
        variant = variants.get(str(order.variant_id))
        cost_price = variant.cost_price if variant else 0.0
        selling_price = variant.selling_price if variant else 0.0
        rows.append(
            {
                "id": str(order.order_id),
                "variant_id": str(order.variant_id),
                "product_id": str(order.product_id),
                "product_name": order.product_name,
                "size": order.size,
                "color": order.color,
                "quantity": order.quantity,
                "phone_number": order.phone_number,
                "country": order.country,
                "status": order.status,
                "allowed_transitions": [s.value for s in allowed_targets(order.status)],
                "approved_by": _stamp(order.approved_by_id, order.approved_by_name, order.approved_at),
                "deleted_by": _stamp(order.deleted_by_id, order.deleted_by_name, order.deleted_at),
                "cost_price": cost_price,
                "selling_price": selling_price,
                "profit": (selling_price - cost_price) * order.quantity,
                "created_at": order.created_at,
                "updated_at": order.updated_at,
            }
        )
    return rows


def _stock_alerts(variants, products, stock, matches) -> list[dict]:
    """Variants whose stock satisfies ``matches``, named after their product.

    Variants whose product no longer exists are left out.
    """
    alerts = []
    for variant_id, variant in variants.items():
        quantity = stock.get(variant_id)
        product = products.get(str(variant.product_id))
        if quantity is None or product is None or not matches(quantity):
            continue
        alerts.append(
            {
                "id": variant_id,
                "product_id": str(variant.product_id),
                "product_name": product.name,
                "color": variant.color,
                "stock_quantity": quantity,
            }
        )
    return sorted(alerts, key=lambda alert: (alert["stock_quantity"], alert["product_name"], alert["color"]))


def dashboard() -> dict:
    """Headline figures for the admin dashboard, with restock alerts."""
    orders = current_domain.repository_for(AdminOrder)._dao.query.all().items
    products = {str(p.id): p for p in current_domain.repository_for(Product)._dao.query.all().items}
    variants = _variants_by_id()
    stock = get_ledger().levels(variants.keys())

    revenue = 0.0
    profit = 0.0
    for order in orders:
        if order.status != OrderStatus.COMPLETED.value:
            continue
        variant = variants.get(str(order.variant_id))
        if variant is None:
            continue
        revenue += variant.selling_price * order.quantity
        profit += (variant.selling_price - variant.cost_price) * order.quantity

    inventory_value = sum(
        variant.cost_price * stock.get(variant_id, 0) for variant_id, variant in variants.items()
    )

    return {
        "total_orders": len(orders),
        "approved_orders": sum(1 for o in orders if o.status == OrderStatus.COMPLETED.value),
        "cancelled_orders": sum(1 for o in orders if o.status == OrderStatus.CANCELLED.value),
        "pending_orders": sum(1 for o in orders if o.status in _OPEN_STATUSES),
        "total_products": sum(1 for p in products.values() if p.is_active),
        "total_revenue": revenue,
        "total_profit": profit,
        "inventory_value": inventory_value,
        "low_stock_variants": _stock_alerts(variants, products, stock, lambda q: 0 < q < LOW_STOCK_THRESHOLD),
        "out_of_stock_variants": _stock_alerts(variants, products, stock, lambda q: q == 0),
    }
