"""Delivery risk classification and the orders-at-risk report."""

from .classifier import (
    RiskLevel,
    RiskAssessment,
    classify_risk,
    days_overdue,
    risk_rank,
)
from .at_risk import (
    OrderRiskResult,
    evaluate_order_risk,
    find_orders_at_risk,
    count_by_level,
    filter_results,
    sort_results,
    SORT_KEYS,
)

__all__ = [
    "RiskLevel",
    "RiskAssessment",
    "classify_risk",
    "days_overdue",
    "risk_rank",
    "OrderRiskResult",
    "evaluate_order_risk",
    "find_orders_at_risk",
    "count_by_level",
    "filter_results",
    "sort_results",
    "SORT_KEYS",
]
