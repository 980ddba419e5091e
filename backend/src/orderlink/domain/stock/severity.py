"""Backorder severity classification.

Pure logic: no database calls or external dependencies.

Severity only escalates when the product holds up an overdue order. A
backordered product whose affected orders are all still within their
delivery date is a planned backorder, however negative its stock is.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class StockSeverity(str, Enum):
    """Backorder severity tier."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    PLANNED_BACKORDER = "Planned Backorder"


# Most urgent first
SEVERITY_ORDER = {
    StockSeverity.CRITICAL: 0,
    StockSeverity.HIGH: 1,
    StockSeverity.MEDIUM: 2,
    StockSeverity.LOW: 3,
    StockSeverity.PLANNED_BACKORDER: 4,
}

CRITICAL_AT_OR_BELOW = -50
HIGH_AT_OR_BELOW = -20
MEDIUM_AT_OR_BELOW = -10


def classify_severity(stock_quantity: int, has_overdue_linked_order: bool) -> StockSeverity:
    """Classify how urgent a backordered product is.

    Args:
        stock_quantity: Current stock (negative = backordered)
        has_overdue_linked_order: Whether any order containing the product
            is past its delivery date

    Returns:
        StockSeverity tier

    Examples:
        >>> classify_severity(-1000, False)
        <StockSeverity.PLANNED_BACKORDER: 'Planned Backorder'>
        >>> classify_severity(-20, True)
        <StockSeverity.HIGH: 'High'>
    """
    # Nothing overdue: the backorder is planned
    if not has_overdue_linked_order:
        return StockSeverity.PLANNED_BACKORDER

    # Escalate by backorder depth
    if stock_quantity <= CRITICAL_AT_OR_BELOW:
        return StockSeverity.CRITICAL
    if stock_quantity <= HIGH_AT_OR_BELOW:
        return StockSeverity.HIGH
    if stock_quantity <= MEDIUM_AT_OR_BELOW:
        return StockSeverity.MEDIUM
    if stock_quantity < 0:
        return StockSeverity.LOW

    # Callers only classify backordered products
    logger.debug(f"Non-negative stock {stock_quantity} classified with overdue orders; using Low")
    return StockSeverity.LOW


def severity_rank(severity: StockSeverity) -> int:
    return SEVERITY_ORDER[StockSeverity(severity)]
