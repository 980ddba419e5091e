"""Matching value types shared by the scorer, the matcher and the API."""

from dataclasses import dataclass
from typing import Any, FrozenSet, Tuple

from ..domain.orders.models import Order

MappingPair = Tuple[str, str]
ExistingMappings = FrozenSet[MappingPair]


@dataclass(frozen=True)
class MatchingConfig:
    """Weights and thresholds for order pair scoring.

    The weights sum to 100 so a pair firing every signal scores 100.

    Attributes:
        order_number_weight: Normalized order numbers are equal
        name_exact_weight: Customer names equal (case-insensitive)
        name_partial_weight: One name contains the other, or fuzzy ratio
            reaches name_similarity
        value_weight: Totals within value_tolerance of each other
        date_weight: Creation dates within date_window_days
        min_confidence: Pairs scoring below this are discarded
        value_tolerance: Relative tolerance for totals (0.10 = 10%)
        date_window_days: Max creation date distance in days
        name_similarity: difflib ratio accepted as a partial name match
    """
    order_number_weight: int = 50
    name_exact_weight: int = 25
    name_partial_weight: int = 15
    value_weight: int = 15
    date_weight: int = 10
    min_confidence: int = 30
    value_tolerance: float = 0.10
    date_window_days: int = 3
    name_similarity: float = 0.85

    @classmethod
    def from_settings(cls, settings: Any) -> "MatchingConfig":
        return cls(
            min_confidence=settings.MATCH_MIN_CONFIDENCE,
            value_tolerance=settings.MATCH_VALUE_TOLERANCE,
            date_window_days=settings.MATCH_DATE_WINDOW_DAYS,
            name_similarity=settings.MATCH_NAME_SIMILARITY,
        )


@dataclass(frozen=True)
class OrderMappingCandidate:
    """Proposed pairing of a system A order with a system B order.

    Not persisted until a user accepts it.

    Attributes:
        order_a: Order from the e-commerce platform
        order_b: Order from the warehouse system
        confidence: Score 0-100
        match_reason: Fired signals, e.g. "Order number match; Total value similar"
        signals: Keys of the fired signals
    """
    order_a: Order
    order_b: Order
    confidence: int
    match_reason: str
    signals: Tuple[str, ...] = ()

    @property
    def pair(self) -> MappingPair:
        return (self.order_a.id, self.order_b.id)


def confidence_band(confidence: float) -> str:
    """Display band for a confidence score: high >= 80, medium >= 60, else low."""
    if confidence >= 80:
        return "high"
    if confidence >= 60:
        return "medium"
    return "low"
