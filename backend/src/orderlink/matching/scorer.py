"""Confidence scoring for cross-system order pairs.

Each signal is independent and adds its weight when it fires:
- order numbers equal after normalization                (default 50)
- customer names equal / partially equal                 (default 25 / 15)
- totals within the relative value tolerance             (default 15)
- creation dates within the date window                  (default 10)

confidence = clamp(sum of fired weights, 0..100)
"""

import difflib
from typing import Any, Dict, List, Tuple

from ..domain.orders.models import Order
from .normalization import normalize_name, normalize_order_number
from .ports import MatchingConfig

SECONDS_PER_DAY = 86400

# Minimum name length for substring matching; shorter names only match exactly
MIN_PARTIAL_NAME_LENGTH = 3

SIGNAL_LABELS = {
    "order_number": "Order number match",
    "customer_name_exact": "Customer name exact match",
    "customer_name_partial": "Customer name partial match",
    "total_value": "Total value similar",
    "date_created": "Created within {days} days",
}


class OrderPairScorer:
    """Score how likely two orders from different systems are the same order."""

    def __init__(self, config: MatchingConfig):
        self.config = config

    def score(self, order_a: Order, order_b: Order) -> Dict[str, Any]:
        """Calculate confidence for a pair of orders.

        Args:
            order_a: Order from system A
            order_b: Order from system B

        Returns:
            Dict with confidence (int 0-100), signals (fired signal keys),
            match_reason (labels joined by "; ") and features (per-signal
            debug values)
        """
        fired: List[Tuple[str, int]] = []

        number_match = self._order_number_match(order_a, order_b)
        if number_match:
            fired.append(("order_number", self.config.order_number_weight))

        name_signal, name_ratio = self._customer_name_signal(order_a, order_b)
        if name_signal == "customer_name_exact":
            fired.append((name_signal, self.config.name_exact_weight))
        elif name_signal == "customer_name_partial":
            fired.append((name_signal, self.config.name_partial_weight))

        value_delta = self._relative_value_delta(order_a, order_b)
        if value_delta is not None and value_delta <= self.config.value_tolerance:
            fired.append(("total_value", self.config.value_weight))

        date_distance = self._date_distance_days(order_a, order_b)
        if date_distance is not None and date_distance <= self.config.date_window_days:
            fired.append(("date_created", self.config.date_weight))

        confidence = max(0, min(100, sum(weight for _, weight in fired)))
        signals = tuple(key for key, _ in fired)

        return {
            "confidence": confidence,
            "signals": signals,
            "match_reason": "; ".join(self._label(key) for key in signals),
            "features": {
                "order_number_match": number_match,
                "name_ratio": round(name_ratio, 3),
                "value_delta": round(value_delta, 4) if value_delta is not None else None,
                "date_distance_days": round(date_distance, 2) if date_distance is not None else None,
            },
        }

    def _label(self, key: str) -> str:
        return SIGNAL_LABELS[key].format(days=self.config.date_window_days)

    def _order_number_match(self, order_a: Order, order_b: Order) -> bool:
        number_a = normalize_order_number(order_a.order_number)
        return bool(number_a) and number_a == normalize_order_number(order_b.order_number)

    def _customer_name_signal(self, order_a: Order, order_b: Order) -> Tuple[str, float]:
        """Classify the customer name comparison.

        Returns:
            (signal key or "", difflib ratio)
        """
        name_a = normalize_name(order_a.customer_name)
        name_b = normalize_name(order_b.customer_name)
        if not name_a or not name_b:
            return "", 0.0

        if name_a == name_b:
            return "customer_name_exact", 1.0

        # ratio() depends on argument order; take the larger so scoring is symmetric
        ratio = max(
            difflib.SequenceMatcher(None, name_a, name_b).ratio(),
            difflib.SequenceMatcher(None, name_b, name_a).ratio(),
        )
        shorter = min(name_a, name_b, key=len)
        if len(shorter) >= MIN_PARTIAL_NAME_LENGTH and (name_a in name_b or name_b in name_a):
            return "customer_name_partial", ratio
        if ratio >= self.config.name_similarity:
            return "customer_name_partial", ratio
        return "", ratio

    def _relative_value_delta(self, order_a: Order, order_b: Order):
        """|a - b| / max(a, b) for positive totals, else None."""
        value_a = order_a.total_value
        value_b = order_b.total_value
        if not value_a or not value_b or value_a <= 0 or value_b <= 0:
            return None
        return abs(value_a - value_b) / max(value_a, value_b)

    def _date_distance_days(self, order_a: Order, order_b: Order):
        if order_a.date_created is None or order_b.date_created is None:
            return None
        delta = order_a.date_created - order_b.date_created
        return abs(delta.total_seconds()) / SECONDS_PER_DAY
