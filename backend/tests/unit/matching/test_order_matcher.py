"""Unit tests for cross-system order matching

Tests cover:
- Exact match scenario and existing-mapping exclusion
- Input order independence
- Swapping the two systems yields the same pairs
- Out-of-range dates and non-finite numbers tolerated
- Malformed orders skipped
- Confidence floor and deterministic ranking
"""

from fixtures.order_fixtures import ongoing_order, woo_order
from orderlink.domain.orders import Order, OrderSource
from orderlink.matching import MatchingConfig, OrderMappingCandidate, find_mapping_candidates

ACME_A = {"id": "a1", "orderNumber": "1001", "customerName": "Acme AS", "totalValue": 1000}
ACME_B = {"id": "b1", "orderNumber": "1001", "customerName": "Acme AS", "totalValue": 1000}


def pairs(candidates):
    return {candidate.pair for candidate in candidates}


class TestExactMatch:

    def test_single_high_confidence_candidate(self):
        candidates = find_mapping_candidates([ACME_A], [ACME_B], set())

        assert len(candidates) == 1
        candidate = candidates[0]
        assert isinstance(candidate, OrderMappingCandidate)
        assert candidate.pair == ("a1", "b1")
        assert candidate.confidence == 90  # number 50 + name 25 + value 15
        assert "order number match" in candidate.match_reason.lower()
        assert candidate.signals == ("order_number", "customer_name_exact", "total_value")

    def test_existing_mapping_excluded(self):
        assert find_mapping_candidates([ACME_A], [ACME_B], {("a1", "b1")}) == []

    def test_existing_mapping_only_excludes_that_pair(self):
        other_b = dict(ACME_B, id="b2")

        candidates = find_mapping_candidates([ACME_A], [ACME_B, other_b], {("a1", "b1")})

        assert pairs(candidates) == {("a1", "b2")}

    def test_every_signal_scores_100(self):
        candidates = find_mapping_candidates(
            [woo_order("a1", "WC-1001", date_created="2025-06-01T10:00:00Z")],
            [ongoing_order("b1", "wc1001", date_created="2025-06-02T09:00:00Z")],
        )

        assert candidates[0].confidence == 100
        assert "Created within 3 days" in candidates[0].match_reason

    def test_accepts_order_instances(self):
        order_a = Order.from_dict(ACME_A, source=OrderSource.WOOCOMMERCE)
        order_b = Order.from_dict(ACME_B, source=OrderSource.ONGOING_WMS)

        assert pairs(find_mapping_candidates([order_a], [order_b])) == {("a1", "b1")}


class TestEdgeCases:

    def test_empty_inputs(self):
        assert find_mapping_candidates([], [], set()) == []
        assert find_mapping_candidates([ACME_A], [], set()) == []
        assert find_mapping_candidates(None, [ACME_B]) == []

    def test_malformed_orders_skipped(self):
        no_id = dict(ACME_A, id=None)
        no_number = dict(ACME_A, id="a2", orderNumber="  ")

        candidates = find_mapping_candidates([no_id, no_number, "junk", ACME_A], [ACME_B])

        assert pairs(candidates) == {("a1", "b1")}

    def test_below_floor_discarded(self):
        order_a = woo_order("a1", "1001", customer_name="Acme AS", total_value=1000, date_created=None)
        order_b = ongoing_order("b1", "2002", customer_name="Someone Else", total_value=5000, date_created=None)

        assert find_mapping_candidates([order_a], [order_b]) == []

    def test_custom_floor(self):
        order_a = woo_order("a1", "1001", customer_name="Acme AS", total_value=None, date_created=None)
        order_b = ongoing_order("b1", "2002", customer_name="Acme AS", total_value=None, date_created=None)

        assert find_mapping_candidates([order_a], [order_b]) == []
        lenient = find_mapping_candidates([order_a], [order_b], config=MatchingConfig(min_confidence=20))
        assert [c.confidence for c in lenient] == [25]

    def test_out_of_range_dates_tolerated(self):
        """Offsets pushing a date past year 1..9999 in UTC leave it unset."""
        order_a = dict(ACME_A, dateCreated="9999-12-31T23:00:00-05:00")
        order_b = dict(ACME_B, dateCreated="0001-01-01T00:30:00+01:00")

        candidates = find_mapping_candidates([order_a], [order_b])

        assert pairs(candidates) == {("a1", "b1")}
        assert "date_created" not in candidates[0].signals
        assert candidates[0].order_a.date_created is None

    def test_non_finite_numbers_tolerated(self):
        order_a = dict(ACME_A, totalValue="NaN", orderLines=5)
        order_b = dict(ACME_B, totalValue="1e400", orderLines=[{"product": {"id": "p", "stockQuantity": "inf"}}])

        candidates = find_mapping_candidates([order_a], [order_b])

        assert candidates[0].signals == ("order_number", "customer_name_exact")
        assert candidates[0].order_a.lines == ()
        assert candidates[0].order_b.lines[0].product.stock_quantity is None


class TestOrdering:

    def test_input_order_independent(self):
        orders_a = [
            woo_order("a1", "1001", customer_name="Acme AS"),
            woo_order("a2", "1002", customer_name="Fjord Sport", total_value=400),
            woo_order("a3", "1003", customer_name="Nordic Outdoor", total_value=2500),
        ]
        orders_b = [
            ongoing_order("b1", "1001", customer_name="Acme AS"),
            ongoing_order("b2", "1002", customer_name="Fjord Sport AS", total_value=410),
            ongoing_order("b3", "9999", customer_name="Nordic Outdoor", total_value=2500),
        ]

        forward = find_mapping_candidates(orders_a, orders_b)
        backward = find_mapping_candidates(list(reversed(orders_a)), list(reversed(orders_b)))

        assert pairs(forward) == pairs(backward)
        assert [c.pair for c in forward] == [c.pair for c in backward]

    def test_swapping_systems_yields_same_pairs(self):
        """Fuzzy names near the similarity threshold match in both directions."""
        orders_a = [
            {"id": "a1", "orderNumber": "1001", "customerName": "Kari Hansen", "totalValue": 1000},
            {"id": "a2", "orderNumber": "1002", "customerName": "Hansen Sykkel", "totalValue": 500},
            {"id": "a3", "orderNumber": "1003", "customerName": "Nordic Outdoor", "totalValue": 2500},
        ]
        orders_b = [
            {"id": "b1", "orderNumber": "7001", "customerName": "Kari Haensn", "totalValue": 1000},
            {"id": "b2", "orderNumber": "7002", "customerName": "Hanssen Sykkel", "totalValue": 510},
            {"id": "b3", "orderNumber": "1003", "customerName": "Fjord Sport", "totalValue": 90},
        ]

        forward = find_mapping_candidates(orders_a, orders_b)
        swapped = find_mapping_candidates(orders_b, orders_a)

        assert {frozenset(c.pair) for c in forward} == {frozenset(c.pair) for c in swapped}
        assert {frozenset(c.pair) for c in forward} == {
            frozenset(("a1", "b1")),
            frozenset(("a2", "b2")),
            frozenset(("a3", "b3")),
        }
        assert sorted(c.confidence for c in forward) == sorted(c.confidence for c in swapped)

    def test_sorted_by_confidence_then_order_number(self):
        orders_a = [
            woo_order("a2", "2002", customer_name="Same Name", total_value=None, date_created=None),
            woo_order("a1", "1001", customer_name="Same Name", total_value=None, date_created=None),
            woo_order("a9", "5005", customer_name="Acme AS"),
        ]
        orders_b = [
            ongoing_order("b1", "7007", customer_name="Same Name", total_value=None, date_created=None),
            ongoing_order("b9", "5005", customer_name="Acme AS"),
        ]

        candidates = find_mapping_candidates(orders_a, orders_b, config=MatchingConfig(min_confidence=20))
        confidences = [c.confidence for c in candidates]

        assert confidences == sorted(confidences, reverse=True)
        assert candidates[0].pair == ("a9", "b9")
        tied = [c.pair for c in candidates if c.confidence == 25]
        assert tied == [("a1", "b1"), ("a2", "b1")]
