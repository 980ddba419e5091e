"""Pydantic schemas for order mapping endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..matching import OrderMappingCandidate, confidence_band
from ..domain.orders.models import Order


class OrderSummarySchema(BaseModel):
    """Order fields shown next to a candidate."""
    id: Optional[str]
    order_number: Optional[str]
    customer_name: Optional[str] = None
    total_value: Optional[float] = None
    date_created: Optional[datetime] = None
    status: Optional[Union[str, int]] = None
    status_label: str

    @classmethod
    def from_order(cls, order: Order) -> "OrderSummarySchema":
        return cls(
            id=order.id,
            order_number=order.order_number,
            customer_name=order.customer_name,
            total_value=order.total_value,
            date_created=order.date_created,
            status=order.status,
            status_label=order.status_label,
        )


class CandidateRequest(BaseModel):
    """Raw order documents from both systems."""
    orders_a: List[Dict[str, Any]] = Field(default_factory=list, description="WooCommerce orders")
    orders_b: List[Dict[str, Any]] = Field(default_factory=list, description="Ongoing WMS orders")


class CandidateSchema(BaseModel):
    """Proposed mapping with confidence."""
    order_a: OrderSummarySchema
    order_b: OrderSummarySchema
    confidence: int = Field(ge=0, le=100)
    band: str
    match_reason: str
    signals: List[str]

    @classmethod
    def from_candidate(cls, candidate: OrderMappingCandidate) -> "CandidateSchema":
        return cls(
            order_a=OrderSummarySchema.from_order(candidate.order_a),
            order_b=OrderSummarySchema.from_order(candidate.order_b),
            confidence=candidate.confidence,
            band=confidence_band(candidate.confidence),
            match_reason=candidate.match_reason,
            signals=list(candidate.signals),
        )


class CandidateListResponse(BaseModel):
    items: List[CandidateSchema]
    total: int


class CreateMappingRequest(BaseModel):
    """Request to map two orders by hand."""
    order_a: Dict[str, Any]
    order_b: Dict[str, Any]
    mapping_type: str = "manual"
    confidence: int = 100
    notes: Optional[str] = None
    mapped_by: Optional[str] = None


class AcceptCandidateRequest(BaseModel):
    """Request to accept a proposed pair. Confidence is re-scored server side."""
    order_a: Dict[str, Any]
    order_b: Dict[str, Any]
    notes: Optional[str] = None
    mapped_by: Optional[str] = None


class UpdateMappingRequest(BaseModel):
    mapping_type: Optional[str] = None
    confidence: Optional[int] = None
    notes: Optional[str] = None


class OrderMappingSchema(BaseModel):
    """Stored order mapping."""
    id: str
    woo_order_id: str
    ongoing_order_id: str
    customer_name: Optional[str]
    order_number: Optional[str]
    mapping_type: str
    confidence: int
    notes: Optional[str]
    is_active: bool
    woo_order_data: Optional[Dict[str, Any]]
    ongoing_order_data: Optional[Dict[str, Any]]
    mapped_by: Optional[str]
    mapped_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class OrderMappingListResponse(BaseModel):
    """Paginated list of order mappings."""
    items: List[OrderMappingSchema]
    total: int
    page: int
    page_size: int
