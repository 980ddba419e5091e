"""Order matching between the e-commerce platform and the warehouse system."""

from .ports import (
    MappingPair,
    ExistingMappings,
    MatchingConfig,
    OrderMappingCandidate,
    confidence_band,
)
from .normalization import normalize_order_number, normalize_name
from .scorer import OrderPairScorer
from .order_matcher import find_mapping_candidates

__all__ = [
    "MappingPair",
    "ExistingMappings",
    "MatchingConfig",
    "OrderMappingCandidate",
    "confidence_band",
    "normalize_order_number",
    "normalize_name",
    "OrderPairScorer",
    "find_mapping_candidates",
]
