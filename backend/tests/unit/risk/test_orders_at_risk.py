"""Unit tests for the orders-at-risk report

Tests cover:
- At-risk rule (open status AND overdue AND backordered line)
- Reason text
- Level counts
- Table filters and sorting
"""

import pytest

from fixtures.order_fixtures import NOW, days_ago, line, ongoing_order, product, woo_order
from orderlink.domain.orders import Order
from orderlink.domain.risk import (
    RiskLevel,
    count_by_level,
    evaluate_order_risk,
    filter_results,
    find_orders_at_risk,
    sort_results,
)

BACKORDERED = product("p-back", -5, "Down Jacket")
IN_STOCK = product("p-ok", 10, "Dry Bag 20L")


def make_order(doc):
    return Order.from_dict(doc)


class TestEvaluateOrderRisk:
    """Single order evaluation"""

    def test_open_overdue_backordered_is_at_risk(self):
        order = make_order(woo_order("w1", "1001", delivery_date=days_ago(20), lines=[line(BACKORDERED)]))

        result = evaluate_order_risk(order, NOW)

        assert result.is_at_risk
        assert result.level == RiskLevel.MEDIUM
        assert result.days_overdue == 20
        assert result.backordered_line_count == 1
        assert result.reason == "Order is 20 days past delivery date and contains 1 backordered product(s)"

    def test_partially_delivered_status_is_open(self):
        order = make_order(woo_order(
            "w1", "1001", status="delvis-levert", delivery_date=days_ago(3), lines=[line(BACKORDERED)]
        ))

        assert evaluate_order_risk(order, NOW).is_at_risk

    def test_completed_order_not_at_risk(self):
        order = make_order(woo_order(
            "w1", "1001", status="completed", delivery_date=days_ago(40), lines=[line(BACKORDERED)]
        ))

        result = evaluate_order_risk(order, NOW)

        assert not result.is_at_risk
        assert result.reason is None
        # Level is still reported for display
        assert result.level == RiskLevel.HIGH

    def test_no_backordered_lines_not_at_risk(self):
        order = make_order(woo_order("w1", "1001", delivery_date=days_ago(40), lines=[line(IN_STOCK)]))

        assert not evaluate_order_risk(order, NOW).is_at_risk

    def test_not_overdue_not_at_risk(self):
        order = make_order(woo_order("w1", "1001", delivery_date=days_ago(-2), lines=[line(BACKORDERED)]))

        result = evaluate_order_risk(order, NOW)

        assert not result.is_at_risk
        assert result.level is None

    def test_missing_delivery_date_not_at_risk(self):
        order = make_order(woo_order("w1", "1001", delivery_date=None, lines=[line(BACKORDERED)]))

        assert not evaluate_order_risk(order, NOW).is_at_risk

    def test_ongoing_open_code_is_at_risk(self):
        order = make_order(ongoing_order("o1", "1001", status=300, delivery_date=days_ago(5), lines=[line(BACKORDERED)]))

        assert evaluate_order_risk(order, NOW).is_at_risk

    def test_ongoing_sent_code_not_at_risk(self):
        order = make_order(ongoing_order("o1", "1001", status=450, delivery_date=days_ago(5), lines=[line(BACKORDERED)]))

        assert not evaluate_order_risk(order, NOW).is_at_risk


@pytest.fixture
def at_risk_orders():
    docs = [
        woo_order("w1", "1001", customer_name="Acme AS", total_value=500, delivery_date=days_ago(5), lines=[line(BACKORDERED)]),
        woo_order("w2", "1002", customer_name="Fjord Sport", total_value=900, delivery_date=days_ago(20), lines=[line(BACKORDERED)]),
        woo_order("w3", "1003", customer_name="Nordic Outdoor", total_value=100, delivery_date=days_ago(45),
                  status="delvis-levert", lines=[line(BACKORDERED)]),
        woo_order("w4", "1004", customer_name="Acme AS", delivery_date=days_ago(45), status="completed", lines=[line(BACKORDERED)]),
        woo_order("w5", "1005", delivery_date=days_ago(45), lines=[line(IN_STOCK)]),
    ]
    return find_orders_at_risk([Order.from_dict(doc) for doc in docs], NOW)


class TestFindOrdersAtRisk:

    def test_keeps_only_at_risk_most_overdue_first(self, at_risk_orders):
        assert [r.order.id for r in at_risk_orders] == ["w3", "w2", "w1"]

    def test_counts(self, at_risk_orders):
        assert count_by_level(at_risk_orders) == {"all": 3, "high": 1, "medium": 1, "low": 1}

    def test_empty_input(self):
        assert find_orders_at_risk([], NOW) == []
        assert count_by_level([]) == {"all": 0, "high": 0, "medium": 0, "low": 0}

    def test_malformed_documents_skipped(self):
        """Out-of-range dates and non-numeric stock never abort the report."""
        orders = [
            make_order(woo_order("w1", "1001", delivery_date="0001-01-01T00:30:00+01:00", lines=[line(BACKORDERED)])),
            make_order(woo_order("w2", "1002", delivery_date=days_ago(5), lines=[line(product("p-nan", 0, stockQuantity="NaN"))])),
            make_order(dict(woo_order("w3", "1003", delivery_date=days_ago(5)), orderLines=5)),
            make_order(woo_order("w4", "1004", delivery_date=days_ago(5), lines=[line(BACKORDERED)])),
        ]

        assert [r.order.id for r in find_orders_at_risk(orders, NOW)] == ["w4"]


class TestFilterAndSort:

    def test_search_matches_customer_case_insensitive(self, at_risk_orders):
        assert [r.order.id for r in filter_results(at_risk_orders, search="acme")] == ["w1"]

    def test_search_matches_order_number(self, at_risk_orders):
        assert [r.order.id for r in filter_results(at_risk_orders, search="1002")] == ["w2"]

    def test_risk_level_filter(self, at_risk_orders):
        assert [r.order.id for r in filter_results(at_risk_orders, risk_level="high")] == ["w3"]

    def test_all_disables_filters(self, at_risk_orders):
        assert len(filter_results(at_risk_orders, risk_level="all", status="all")) == 3

    def test_status_filter(self, at_risk_orders):
        assert [r.order.id for r in filter_results(at_risk_orders, status="delvis-levert")] == ["w3"]

    def test_sort_by_total_value_ascending(self, at_risk_orders):
        ordered = sort_results(at_risk_orders, "total_value", descending=False)

        assert [r.order.id for r in ordered] == ["w3", "w1", "w2"]

    def test_sort_by_risk_level(self, at_risk_orders):
        ordered = sort_results(at_risk_orders, "risk_level", descending=True)

        assert [r.level for r in ordered] == [RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.LOW]

    def test_unknown_sort_field(self, at_risk_orders):
        with pytest.raises(ValueError, match="Unknown sort field"):
            sort_results(at_risk_orders, "colour")
