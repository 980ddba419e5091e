"""Backordered products report.

Joins backordered products (stock < 0) with the open orders that contain
them, marks which of those orders are overdue, and classifies each product's
severity from that.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..orders.models import Order, ProductRef
from ..orders.status import is_open_status
from ..risk.classifier import classify_risk
from .severity import StockSeverity, classify_severity, severity_rank

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AffectedOrder:
    """Open order waiting on a backordered product."""
    order: Order
    quantity: float
    is_overdue: bool
    days_overdue: Optional[int] = None


@dataclass(frozen=True)
class BackorderedProduct:
    """Backordered product with the orders it holds up."""
    product: ProductRef
    severity: StockSeverity
    affected_orders: Tuple[AffectedOrder, ...] = field(default_factory=tuple)

    @property
    def has_overdue_orders(self) -> bool:
        return any(affected.is_overdue for affected in self.affected_orders)

    @property
    def total_order_value(self) -> float:
        return sum(affected.order.total_value or 0.0 for affected in self.affected_orders)

    @property
    def backordered_units(self) -> int:
        return abs(self.product.stock_quantity or 0)


@dataclass(frozen=True)
class BackorderReport:
    """Backordered products, most severe first, with totals."""
    products: Tuple[BackorderedProduct, ...]

    @property
    def product_count(self) -> int:
        return len(self.products)

    @property
    def total_backordered_units(self) -> int:
        return sum(product.backordered_units for product in self.products)

    @property
    def severity_counts(self) -> Dict[str, int]:
        counts = {severity.value: 0 for severity in StockSeverity}
        for product in self.products:
            counts[product.severity.value] += 1
        return counts


def affected_orders_for(product: ProductRef, orders: Iterable[Order], now: Any) -> List[AffectedOrder]:
    """Open orders with at least one line for the product."""
    affected = []
    for order in orders:
        if not is_open_status(order.status, order.source):
            continue
        lines = [line for line in order.lines if line.references(product)]
        if not lines:
            continue
        assessment = classify_risk(order.delivery_date, now)
        affected.append(AffectedOrder(
            order=order,
            quantity=sum(line.outstanding_quantity for line in lines),
            is_overdue=assessment.is_at_risk,
            days_overdue=assessment.days_overdue,
        ))
    return affected


def build_backorder_report(
    products: Iterable[ProductRef],
    orders: Iterable[Order],
    now: Optional[Any] = None,
) -> BackorderReport:
    """Build the backordered products report.

    Args:
        products: Product snapshots; those without negative stock are ignored
        orders: Order snapshots used to find affected orders
        now: Evaluation instant; defaults to the current UTC time

    Returns:
        BackorderReport sorted by severity (Critical first), then by stock
        (most negative first)
    """
    if now is None:
        now = datetime.now(timezone.utc)

    orders = list(orders)
    entries = []
    for product in products:
        if not product.is_backordered:
            continue
        affected = affected_orders_for(product, orders, now)
        has_overdue = any(entry.is_overdue for entry in affected)
        entries.append(BackorderedProduct(
            product=product,
            severity=classify_severity(product.stock_quantity, has_overdue),
            affected_orders=tuple(affected),
        ))

    entries.sort(key=lambda entry: (severity_rank(entry.severity), entry.product.stock_quantity))
    report = BackorderReport(products=tuple(entries))

    logger.info(
        f"Found {report.product_count} backordered products "
        f"({report.total_backordered_units} units)",
        extra={"severity_counts": report.severity_counts},
    )
    return report
