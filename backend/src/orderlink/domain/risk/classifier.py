"""Delivery risk classification.

Risk is always derived from the promised delivery date and the moment of
evaluation; it is never stored. An order with no delivery date, or one whose
delivery date has not passed by at least one whole day, has no risk level
(absent, not ``low``).

Tiers by whole days overdue:
    > 30     -> high
    14 .. 30 -> medium
    1 .. 13  -> low
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from ..orders.dates import parse_datetime

SECONDS_PER_DAY = 86400

HIGH_RISK_AFTER_DAYS = 30
MEDIUM_RISK_FROM_DAYS = 14


class RiskLevel(str, Enum):
    """Delivery risk tier."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


RISK_RANK = {
    RiskLevel.HIGH: 3,
    RiskLevel.MEDIUM: 2,
    RiskLevel.LOW: 1,
}


@dataclass(frozen=True)
class RiskAssessment:
    """Result of classify_risk.

    Attributes:
        level: Risk tier, None when the order is not overdue
        days_overdue: Whole days past the delivery date, None when not overdue
    """
    level: Optional[RiskLevel] = None
    days_overdue: Optional[int] = None

    @property
    def is_at_risk(self) -> bool:
        return self.level is not None


NO_RISK = RiskAssessment()


def days_overdue(delivery_date: Any, now: Any) -> Optional[int]:
    """Whole days elapsed since the delivery date (floor), or None.

    Returns None when either value is missing or unparseable. The result can
    be zero or negative for dates that are not yet due.
    """
    delivery = parse_datetime(delivery_date)
    current = parse_datetime(now)
    if delivery is None or current is None:
        return None
    return math.floor((current - delivery).total_seconds() / SECONDS_PER_DAY)


def level_for_days(days: int) -> Optional[RiskLevel]:
    if days > HIGH_RISK_AFTER_DAYS:
        return RiskLevel.HIGH
    if days >= MEDIUM_RISK_FROM_DAYS:
        return RiskLevel.MEDIUM
    if days >= 1:
        return RiskLevel.LOW
    return None


def classify_risk(delivery_date: Any, now: Optional[Any] = None) -> RiskAssessment:
    """Classify delivery risk for an order.

    Args:
        delivery_date: Promised delivery date (datetime, date, string or None)
        now: Evaluation instant; defaults to the current UTC time

    Returns:
        RiskAssessment with level and days_overdue, both None when the order
        is not overdue or the dates are missing or invalid

    Examples:
        >>> classify_risk('2025-06-01', '2025-06-15').level
        <RiskLevel.MEDIUM: 'medium'>
        >>> classify_risk(None, '2025-06-15')
        RiskAssessment(level=None, days_overdue=None)
    """
    if now is None:
        now = datetime.now(timezone.utc)

    days = days_overdue(delivery_date, now)
    if days is None or days <= 0:
        return NO_RISK

    return RiskAssessment(level=level_for_days(days), days_overdue=days)


def risk_rank(level: Optional[Any]) -> int:
    """Sort weight for a risk level: high=3, medium=2, low=1, none=0."""
    if level is None:
        return 0
    try:
        return RISK_RANK[RiskLevel(level)]
    except ValueError:
        return 0
