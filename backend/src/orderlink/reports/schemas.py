"""Pydantic schemas for the risk and stock report endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..domain.risk import OrderRiskResult, RiskAssessment
from ..domain.stock import AffectedOrder, BackorderedProduct


class OrdersAtRiskRequest(BaseModel):
    """Order documents to evaluate."""
    orders: List[Dict[str, Any]] = Field(default_factory=list)
    now: Optional[datetime] = Field(None, description="Evaluation instant, defaults to current time")


class OrderRiskSchema(BaseModel):
    """Row of the orders-at-risk table."""
    id: Optional[str]
    order_number: Optional[str]
    customer_name: Optional[str]
    status: Optional[Union[str, int]]
    status_label: str
    total_value: Optional[float]
    delivery_date: Optional[datetime]
    risk_level: Optional[str]
    days_overdue: Optional[int]
    backordered_line_count: int
    reason: Optional[str]

    @classmethod
    def from_result(cls, result: OrderRiskResult) -> "OrderRiskSchema":
        order = result.order
        return cls(
            id=order.id,
            order_number=order.order_number,
            customer_name=order.customer_name,
            status=order.status,
            status_label=order.status_label,
            total_value=order.total_value,
            delivery_date=order.delivery_date,
            risk_level=result.level.value if result.level else None,
            days_overdue=result.days_overdue,
            backordered_line_count=result.backordered_line_count,
            reason=result.reason,
        )


class OrdersAtRiskResponse(BaseModel):
    """Paginated orders-at-risk table with per-level counts (before filtering)."""
    items: List[OrderRiskSchema]
    total: int
    page: int
    page_size: int
    counts: Dict[str, int]


class ClassifyRiskRequest(BaseModel):
    delivery_date: Optional[str] = None
    now: Optional[str] = None


class RiskAssessmentSchema(BaseModel):
    risk_level: Optional[str]
    days_overdue: Optional[int]
    is_at_risk: bool

    @classmethod
    def from_assessment(cls, assessment: RiskAssessment) -> "RiskAssessmentSchema":
        return cls(
            risk_level=assessment.level.value if assessment.level else None,
            days_overdue=assessment.days_overdue,
            is_at_risk=assessment.is_at_risk,
        )


class BackorderReportRequest(BaseModel):
    """Product and order documents to join."""
    products: List[Dict[str, Any]] = Field(default_factory=list)
    orders: List[Dict[str, Any]] = Field(default_factory=list)
    now: Optional[datetime] = None


class AffectedOrderSchema(BaseModel):
    id: Optional[str]
    order_number: Optional[str]
    customer_name: Optional[str]
    status_label: str
    quantity: float
    is_overdue: bool
    days_overdue: Optional[int]

    @classmethod
    def from_affected(cls, affected: AffectedOrder) -> "AffectedOrderSchema":
        return cls(
            id=affected.order.id,
            order_number=affected.order.order_number,
            customer_name=affected.order.customer_name,
            status_label=affected.order.status_label,
            quantity=affected.quantity,
            is_overdue=affected.is_overdue,
            days_overdue=affected.days_overdue,
        )


class BackorderedProductSchema(BaseModel):
    id: Optional[str]
    name: Optional[str]
    sku: Optional[str]
    stock_quantity: Optional[int]
    severity: str
    has_overdue_orders: bool
    total_order_value: float
    affected_orders: List[AffectedOrderSchema]

    @classmethod
    def from_product(cls, entry: BackorderedProduct) -> "BackorderedProductSchema":
        return cls(
            id=entry.product.id,
            name=entry.product.name,
            sku=entry.product.sku,
            stock_quantity=entry.product.stock_quantity,
            severity=entry.severity.value,
            has_overdue_orders=entry.has_overdue_orders,
            total_order_value=entry.total_order_value,
            affected_orders=[AffectedOrderSchema.from_affected(a) for a in entry.affected_orders],
        )


class BackorderReportResponse(BaseModel):
    items: List[BackorderedProductSchema]
    total: int
    total_backordered_units: int
    severity_counts: Dict[str, int]


class ClassifySeverityRequest(BaseModel):
    stock_quantity: int
    has_overdue_linked_order: bool


class SeveritySchema(BaseModel):
    severity: str
