"""Cross-system order matching.

Pairs every order from system A (WooCommerce) with every order from
system B (Ongoing WMS), scores each pair and keeps the plausible ones.

Pipeline:
1. Coerce raw documents into Order snapshots
2. Drop malformed orders (no id or no order number)
3. Skip pairs that already have an active mapping
4. Score remaining pairs, discard those below min_confidence
5. Rank by confidence DESC with a deterministic tie order
"""

import logging
from typing import Any, Iterable, List, Optional, Union

from ..domain.orders.models import Order
from ..domain.orders.status import OrderSource
from .normalization import normalize_order_number
from .ports import ExistingMappings, MatchingConfig, OrderMappingCandidate
from .scorer import OrderPairScorer

logger = logging.getLogger(__name__)

OrderInput = Union[Order, dict]


def _coerce_orders(orders: Optional[Iterable[OrderInput]], source: OrderSource) -> List[Order]:
    """Turn raw documents into Order snapshots and drop malformed ones."""
    valid = []
    for raw in orders or ():
        if isinstance(raw, Order):
            order = raw
        elif isinstance(raw, dict):
            order = Order.from_dict(raw, source=source)
        else:
            logger.debug(f"Skipping non-order input of type {type(raw).__name__}")
            continue
        if not order.id or not normalize_order_number(order.order_number):
            logger.debug(f"Skipping malformed order id={order.id!r} order_number={order.order_number!r}")
            continue
        valid.append(order)
    return valid


def _candidate_sort_key(candidate: OrderMappingCandidate):
    return (
        -candidate.confidence,
        candidate.order_a.order_number or "",
        candidate.order_b.order_number or "",
        candidate.order_a.id or "",
        candidate.order_b.id or "",
    )


def find_mapping_candidates(
    orders_a: Optional[Iterable[OrderInput]],
    orders_b: Optional[Iterable[OrderInput]],
    existing_mappings: Optional[Iterable[Any]] = None,
    config: Optional[MatchingConfig] = None,
) -> List[OrderMappingCandidate]:
    """Propose mappings between two order lists.

    Args:
        orders_a: Orders from system A (Order or raw document dicts)
        orders_b: Orders from system B (Order or raw document dicts)
        existing_mappings: (order_a_id, order_b_id) pairs already mapped
        config: Weights and thresholds; defaults to MatchingConfig()

    Returns:
        Candidates with confidence >= min_confidence, highest first.
        Never contains a pair from existing_mappings.
    """
    config = config or MatchingConfig()
    existing: ExistingMappings = frozenset(tuple(pair) for pair in (existing_mappings or ()))

    left = _coerce_orders(orders_a, OrderSource.WOOCOMMERCE)
    right = _coerce_orders(orders_b, OrderSource.ONGOING_WMS)
    if not left or not right:
        logger.info(
            "No orders to match",
            extra={"pair_count": 0, "candidate_count": 0},
        )
        return []

    scorer = OrderPairScorer(config)
    candidates = []
    skipped = 0

    for order_a in left:
        for order_b in right:
            if (order_a.id, order_b.id) in existing:
                skipped += 1
                continue

            result = scorer.score(order_a, order_b)
            if result["confidence"] < config.min_confidence:
                continue

            candidates.append(OrderMappingCandidate(
                order_a=order_a,
                order_b=order_b,
                confidence=result["confidence"],
                match_reason=result["match_reason"],
                signals=result["signals"],
            ))

    candidates.sort(key=_candidate_sort_key)

    logger.info(
        f"Matched {len(left)}x{len(right)} orders into {len(candidates)} candidates",
        extra={
            "pair_count": len(left) * len(right),
            "skipped_pairs": skipped,
            "candidate_count": len(candidates),
        },
    )
    return candidates
