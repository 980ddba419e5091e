"""Orders-at-risk report.

An order is at risk when all of the following hold:
- it is still awaiting delivery (open status in its source system)
- its delivery date is at least one whole day in the past
- at least one of its lines is for a backordered product (stock < 0)

The report is recomputed from the order snapshots on every call.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..orders.models import Order
from ..orders.status import is_open_status
from .classifier import RiskLevel, classify_risk, risk_rank

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderRiskResult:
    """Risk evaluation of one order.

    Attributes:
        order: Evaluated order snapshot
        level: Risk tier (None when not overdue)
        days_overdue: Whole days past delivery date (None when not overdue)
        backordered_line_count: Lines whose product is backordered
        is_at_risk: Open, overdue and containing backordered products
        reason: Human readable explanation for at-risk orders
    """
    order: Order
    level: Optional[RiskLevel]
    days_overdue: Optional[int]
    backordered_line_count: int
    is_at_risk: bool
    reason: Optional[str] = None


def evaluate_order_risk(order: Order, now: Optional[Any] = None) -> OrderRiskResult:
    """Evaluate a single order against the at-risk rules."""
    if now is None:
        now = datetime.now(timezone.utc)

    assessment = classify_risk(order.delivery_date, now)
    backordered_count = len(order.backordered_lines)
    is_at_risk = (
        is_open_status(order.status, order.source)
        and assessment.is_at_risk
        and backordered_count > 0
    )

    if not is_at_risk:
        return OrderRiskResult(
            order=order,
            level=assessment.level,
            days_overdue=assessment.days_overdue,
            backordered_line_count=backordered_count,
            is_at_risk=False,
        )

    reason = (
        f"Order is {assessment.days_overdue} days past delivery date and contains "
        f"{backordered_count} backordered product(s)"
    )
    return OrderRiskResult(
        order=order,
        level=assessment.level,
        days_overdue=assessment.days_overdue,
        backordered_line_count=backordered_count,
        is_at_risk=True,
        reason=reason,
    )


def count_by_level(results: Iterable[OrderRiskResult]) -> Dict[str, int]:
    """Count at-risk results per level, plus the total under "all"."""
    counts = {"all": 0, RiskLevel.HIGH.value: 0, RiskLevel.MEDIUM.value: 0, RiskLevel.LOW.value: 0}
    for result in results:
        if not result.is_at_risk:
            continue
        counts["all"] += 1
        counts[result.level.value] += 1
    return counts


def find_orders_at_risk(orders: Iterable[Order], now: Optional[Any] = None) -> List[OrderRiskResult]:
    """Evaluate all orders and keep only those at risk.

    Args:
        orders: Order snapshots (any source system)
        now: Evaluation instant; defaults to the current UTC time

    Returns:
        At-risk results, most overdue first
    """
    if now is None:
        now = datetime.now(timezone.utc)

    evaluated = [evaluate_order_risk(order, now) for order in orders]
    at_risk = [result for result in evaluated if result.is_at_risk]

    counts = count_by_level(at_risk)
    logger.info(
        f"Identified {counts['all']} of {len(evaluated)} orders at risk",
        extra={"risk_counts": counts},
    )

    return sort_results(at_risk, "days_overdue", descending=True)


def filter_results(
    results: Iterable[OrderRiskResult],
    search: Optional[str] = None,
    risk_level: Optional[str] = None,
    status: Optional[str] = None,
) -> List[OrderRiskResult]:
    """Apply the at-risk table filters.

    Args:
        results: Results to filter
        search: Case-insensitive substring of order number or customer name
        risk_level: "high" | "medium" | "low"; None or "all" disables
        status: Exact status value; None or "all" disables
    """
    needle = search.strip().lower() if search else ""
    filtered = []
    for result in results:
        order = result.order
        if needle:
            haystacks = [(order.order_number or "").lower(), (order.customer_name or "").lower()]
            if not any(needle in haystack for haystack in haystacks):
                continue
        if risk_level and risk_level != "all":
            if result.level is None or result.level.value != risk_level:
                continue
        if status and status != "all" and str(order.status) != status:
            continue
        filtered.append(result)
    return filtered


_MIN_DATE = datetime.min.replace(tzinfo=timezone.utc)

SORT_KEYS: Dict[str, Callable[[OrderRiskResult], Any]] = {
    "order_number": lambda r: (r.order.order_number or "").lower(),
    "customer_name": lambda r: (r.order.customer_name or "").lower(),
    "status": lambda r: str(r.order.status or ""),
    "risk_level": lambda r: risk_rank(r.level),
    "delivery_date": lambda r: r.order.delivery_date or _MIN_DATE,
    "days_overdue": lambda r: r.days_overdue or 0,
    "total_value": lambda r: r.order.total_value or 0.0,
}


def sort_results(
    results: Iterable[OrderRiskResult],
    field: str = "days_overdue",
    descending: bool = True,
) -> List[OrderRiskResult]:
    """Sort results by a table column.

    Raises:
        ValueError: If field is not a sortable column
    """
    if field not in SORT_KEYS:
        raise ValueError(f"Unknown sort field '{field}'. Allowed: {sorted(SORT_KEYS)}")
    return sorted(results, key=SORT_KEYS[field], reverse=descending)
