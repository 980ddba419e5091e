"""Prometheus metrics for OrderLink.

Defines operational metrics for matching runs, risk reports and mapping changes.
"""

from prometheus_client import Counter, Histogram, Gauge

# Matching metrics
matching_runs_total = Counter(
    "orderlink_matching_runs_total",
    "Total order matching passes executed",
)

mapping_candidates_total = Counter(
    "orderlink_mapping_candidates_total",
    "Total mapping candidates proposed",
    ["band"]  # band: high|medium|low
)

candidate_confidence_histogram = Histogram(
    "orderlink_candidate_confidence",
    "Mapping candidate confidence distribution (0-100)",
    buckets=[30, 40, 50, 60, 70, 80, 90, 100]
)

# Mapping lifecycle metrics
order_mappings_total = Counter(
    "orderlink_order_mappings_total",
    "Order mapping lifecycle events",
    ["event", "mapping_type"]  # event: created|deactivated
)

# Risk report metrics
orders_at_risk = Gauge(
    "orderlink_orders_at_risk",
    "Orders at risk in the most recent report",
    ["level"]  # level: high|medium|low
)

backordered_products = Gauge(
    "orderlink_backordered_products",
    "Backordered products in the most recent report",
    ["severity"]
)
