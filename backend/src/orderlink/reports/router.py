"""Risk and stock report endpoints.

Reports are computed from the order and product documents in the request;
nothing is stored.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..domain.orders.models import Order, ProductRef
from ..domain.risk import (
    RiskLevel,
    SORT_KEYS,
    classify_risk,
    count_by_level,
    filter_results,
    find_orders_at_risk,
    sort_results,
)
from ..domain.stock import build_backorder_report, classify_severity
from ..observability.metrics import backordered_products, orders_at_risk
from .schemas import (
    BackorderReportRequest,
    BackorderReportResponse,
    BackorderedProductSchema,
    ClassifyRiskRequest,
    ClassifySeverityRequest,
    OrderRiskSchema,
    OrdersAtRiskRequest,
    OrdersAtRiskResponse,
    RiskAssessmentSchema,
    SeveritySchema,
)

router = APIRouter(tags=["reports"])


@router.post("/risk/orders-at-risk", response_model=OrdersAtRiskResponse)
def orders_at_risk_report(
    request: OrdersAtRiskRequest,
    risk_level: Optional[str] = Query(None, description="Filter by level (high, medium, low, all)"),
    status: Optional[str] = Query(None, description="Filter by order status"),
    search: Optional[str] = Query(None, description="Search order number or customer name"),
    sort: str = Query("days_overdue", description="Sort column"),
    descending: bool = Query(True),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=500, description="Items per page"),
):
    """Open, overdue orders containing backordered products.

    Args:
        request: Order documents and optional evaluation instant
        risk_level: Level filter
        status: Status filter
        search: Free-text filter
        sort: One of the sortable columns
        descending: Sort direction
        page: Page number (1-indexed)
        page_size: Items per page

    Returns:
        Paginated at-risk orders with per-level counts

    Raises:
        HTTPException: 422 for an unknown sort column or risk level
    """
    if sort not in SORT_KEYS:
        raise HTTPException(status_code=422, detail=f"Unknown sort field '{sort}'. Allowed: {sorted(SORT_KEYS)}")
    if risk_level and risk_level != "all" and risk_level not in {level.value for level in RiskLevel}:
        raise HTTPException(status_code=422, detail=f"Unknown risk level '{risk_level}'")

    orders = [Order.from_dict(document) for document in request.orders]
    results = find_orders_at_risk(orders, request.now)

    counts = count_by_level(results)
    for level in RiskLevel:
        orders_at_risk.labels(level=level.value).set(counts[level.value])

    filtered = sort_results(
        filter_results(results, search=search, risk_level=risk_level, status=status),
        sort,
        descending=descending,
    )
    offset = (page - 1) * page_size

    return OrdersAtRiskResponse(
        items=[OrderRiskSchema.from_result(r) for r in filtered[offset:offset + page_size]],
        total=len(filtered),
        page=page,
        page_size=page_size,
        counts=counts,
    )


@router.post("/risk/classify", response_model=RiskAssessmentSchema)
def classify_delivery_risk(request: ClassifyRiskRequest):
    """Classify delivery risk for a single delivery date."""
    return RiskAssessmentSchema.from_assessment(classify_risk(request.delivery_date, request.now))


@router.post("/stock/backordered-products", response_model=BackorderReportResponse)
def backordered_products_report(request: BackorderReportRequest):
    """Backordered products with severity and the open orders waiting on them."""
    products = [ProductRef.from_dict(document) for document in request.products]
    orders = [Order.from_dict(document) for document in request.orders]
    report = build_backorder_report(products, orders, request.now)

    for severity, count in report.severity_counts.items():
        backordered_products.labels(severity=severity).set(count)

    return BackorderReportResponse(
        items=[BackorderedProductSchema.from_product(p) for p in report.products],
        total=report.product_count,
        total_backordered_units=report.total_backordered_units,
        severity_counts=report.severity_counts,
    )


@router.post("/stock/classify", response_model=SeveritySchema)
def classify_stock_severity(request: ClassifySeverityRequest):
    """Classify severity for a single backordered product."""
    return SeveritySchema(
        severity=classify_severity(request.stock_quantity, request.has_overdue_linked_order).value
    )
