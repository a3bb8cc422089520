"""Integration tests for the admin order projection, order rows and dashboard figures."""

import json

from protean import current_domain
from storefront.catalogue.management import CreateProduct
from storefront.catalogue.variants import AddVariant, RemoveVariant
from storefront.ordering import reports
from storefront.ordering.placement import PlaceOrder
from storefront.ordering.projections.admin_orders import AdminOrder
from storefront.ordering.transitions import ChangeOrderStatus, RemoveOrder


def _variant(stock=10, cost_price=20.0, selling_price=50.0, is_active=True, name="Canvas Sneaker", color="White"):
    product_id = current_domain.process(
        CreateProduct(name=name, category="shoes", is_active=is_active, available_sizes=json.dumps([])),
        asynchronous=False,
    )
    return current_domain.process(
        AddVariant(
            product_id=product_id,
            color=color,
            cost_price=cost_price,
            selling_price=selling_price,
            stock_quantity=stock,
        ),
        asynchronous=False,
    )


def _place(variant_id, quantity=2):
    return current_domain.process(
        PlaceOrder(variant_id=variant_id, quantity=quantity, phone_number="+15550100", country="US"),
        asynchronous=False,
    )


def _change(order_id, status, admin_id="adm-1", admin_name="Dana"):
    current_domain.process(
        ChangeOrderStatus(order_id=order_id, status=status, admin_id=admin_id, admin_name=admin_name),
        asynchronous=False,
    )


def _complete(order_id):
    _change(order_id, "confirmed")
    _change(order_id, "completed", admin_id="adm-2", admin_name="Sam")


class TestAdminOrderProjection:
    def test_placed_order_is_projected(self):
        variant_id = _variant()
        order_id = _place(variant_id)

        record = current_domain.repository_for(AdminOrder).get(order_id)
        assert record.status == "pending"
        assert record.variant_id == variant_id
        assert record.product_name == "Canvas Sneaker"
        assert record.country == "US"

    def test_completion_stamps_approver(self):
        order_id = _place(_variant())
        _complete(order_id)

        record = current_domain.repository_for(AdminOrder).get(order_id)
        assert record.status == "completed"
        assert record.approved_by_id == "adm-2"
        assert record.approved_by_name == "Sam"
        assert record.approved_at is not None
        assert record.deleted_by_id is None

    def test_removal_stamps_deleter(self):
        order_id = _place(_variant())
        _complete(order_id)
        current_domain.process(RemoveOrder(order_id=order_id, admin_id="adm-3", admin_name="Lee"), asynchronous=False)

        record = current_domain.repository_for(AdminOrder).get(order_id)
        assert record.status == "cancelled"
        assert record.deleted_by_name == "Lee"
        assert record.approved_by_name == "Sam"

    def test_pending_cancel_leaves_no_deleter(self):
        order_id = _place(_variant())
        _change(order_id, "cancelled")

        record = current_domain.repository_for(AdminOrder).get(order_id)
        assert record.status == "cancelled"
        assert record.deleted_by_id is None


class TestAdminOrderRows:
    def test_rows_carry_prices_profit_and_transitions(self):
        order_id = _place(_variant(cost_price=20.0, selling_price=50.0), quantity=3)

        [row] = reports.admin_order_rows()
        assert row["id"] == order_id
        assert row["cost_price"] == 20.0
        assert row["selling_price"] == 50.0
        assert row["profit"] == 90.0
        assert row["allowed_transitions"] == ["confirmed", "cancelled"]
        assert row["approved_by"] is None

    def test_rows_are_newest_first(self):
        variant_id = _variant()
        first = _place(variant_id, quantity=1)
        second = _place(variant_id, quantity=1)

        assert [row["id"] for row in reports.admin_order_rows()] == [second, first]

    def test_completed_row_has_approver_stamp(self):
        order_id = _place(_variant())
        _complete(order_id)

        [row] = reports.admin_order_rows()
        assert row["approved_by"]["admin_id"] == "adm-2"
        assert row["approved_by"]["admin_name"] == "Sam"
        assert row["approved_by"]["timestamp"] is not None
        assert row["allowed_transitions"] == ["cancelled"]

    def test_deleted_variant_reports_zero_prices(self):
        variant_id = _variant()
        _place(variant_id)
        current_domain.process(RemoveVariant(variant_id=variant_id), asynchronous=False)

        [row] = reports.admin_order_rows()
        assert row["cost_price"] == 0.0
        assert row["selling_price"] == 0.0
        assert row["profit"] == 0.0


class TestDashboard:
    def test_empty_store(self):
        figures = reports.dashboard()
        assert figures["total_orders"] == 0
        assert figures["total_revenue"] == 0.0
        assert figures["inventory_value"] == 0.0
        assert figures["low_stock_variants"] == []
        assert figures["out_of_stock_variants"] == []

    def test_figures(self):
        busy = _variant(stock=10, cost_price=20.0, selling_price=50.0)
        _variant(stock=0, cost_price=5.0, selling_price=10.0, name="Slip-on", color="Black")
        _variant(stock=3, cost_price=10.0, selling_price=15.0, is_active=False, name="Loafer", color="Tan")

        completed = _place(busy, quantity=2)
        _complete(completed)
        cancelled = _place(busy, quantity=1)
        _change(cancelled, "cancelled")
        _place(busy, quantity=1)

        figures = reports.dashboard()
        assert figures["total_orders"] == 3
        assert figures["approved_orders"] == 1
        assert figures["cancelled_orders"] == 1
        assert figures["pending_orders"] == 1
        assert figures["total_products"] == 2
        assert figures["total_revenue"] == 100.0
        assert figures["total_profit"] == 60.0
        # busy: 10 - 2 (placed) - 2 (completed) - 1 (open) = 5 on hand
        assert figures["inventory_value"] == 5 * 20.0 + 3 * 10.0

    def test_restock_alerts_name_the_variant(self):
        _variant(stock=10)
        low = _variant(stock=3, name="Loafer", color="Tan")
        out = _variant(stock=0, name="Slip-on", color="Black")

        figures = reports.dashboard()

        [low_alert] = figures["low_stock_variants"]
        assert low_alert["id"] == low
        assert low_alert["product_name"] == "Loafer"
        assert low_alert["color"] == "Tan"
        assert low_alert["stock_quantity"] == 3
        assert low_alert["product_id"]
        [out_alert] = figures["out_of_stock_variants"]
        assert out_alert["id"] == out
        assert out_alert["product_name"] == "Slip-on"
        assert out_alert["color"] == "Black"
        assert out_alert["stock_quantity"] == 0

    def test_stock_at_threshold_is_not_low(self, ledger):
        variant_id = _variant(stock=5)
        assert reports.dashboard()["low_stock_variants"] == []

        ledger.reserve(variant_id, 1)
        assert [alert["id"] for alert in reports.dashboard()["low_stock_variants"]] == [variant_id]

    def test_sold_out_variant_moves_to_out_of_stock(self):
        variant_id = _variant(stock=2, name="Loafer", color="Tan")
        _place(variant_id, quantity=2)

        figures = reports.dashboard()
        assert figures["low_stock_variants"] == []
        assert [alert["id"] for alert in figures["out_of_stock_variants"]] == [variant_id]
