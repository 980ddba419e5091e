"""Order mapping API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..domain.orders.models import Order
from ..domain.orders.status import OrderSource
from ..matching import MatchingConfig, OrderMappingCandidate, OrderPairScorer
from .exceptions import InvalidMappingError, MappingConflictError, MappingNotFoundError
from .schemas import (
    AcceptCandidateRequest,
    CandidateListResponse,
    CandidateRequest,
    CandidateSchema,
    CreateMappingRequest,
    OrderMappingListResponse,
    OrderMappingSchema,
    UpdateMappingRequest,
)
from .service import OrderMappingService

router = APIRouter(prefix="/order-mappings", tags=["order-mappings"])


def get_matching_config() -> MatchingConfig:
    """Dependency returning matching weights from settings."""
    return MatchingConfig.from_settings(settings)


@router.post("/candidates", response_model=CandidateListResponse)
def find_candidates(
    request: CandidateRequest,
    db: Session = Depends(get_db),
    config: MatchingConfig = Depends(get_matching_config),
):
    """Propose mappings between WooCommerce and Ongoing WMS orders.

    Pairs that already have an active mapping are never returned.

    Args:
        request: Order documents from both systems
        db: Database session
        config: Matching weights and thresholds

    Returns:
        Candidates ranked by confidence
    """
    try:
        candidates = OrderMappingService(db).find_candidates(request.orders_a, request.orders_b, config)
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=f"Loading existing mappings failed: {str(e)}")

    return CandidateListResponse(
        items=[CandidateSchema.from_candidate(c) for c in candidates],
        total=len(candidates),
    )


@router.get("", response_model=OrderMappingListResponse)
def list_mappings(
    search: Optional[str] = Query(None, description="Search customer name, order number or order ids"),
    mapping_type: Optional[str] = Query(None, description="Filter by type (exact, manual, suggested)"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    db: Session = Depends(get_db),
):
    """List active order mappings, newest first."""
    try:
        mappings, total = OrderMappingService(db).list_mappings(
            search=search,
            mapping_type=mapping_type,
            page=page,
            page_size=page_size,
        )
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=f"Query failed: {str(e)}")

    return OrderMappingListResponse(
        items=[OrderMappingSchema.model_validate(m) for m in mappings],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=OrderMappingSchema, status_code=201)
def create_mapping(request: CreateMappingRequest, db: Session = Depends(get_db)):
    """Map two orders by hand.

    Raises:
        HTTPException: 409 if the pair is already mapped, 422 if fields are invalid
    """
    try:
        mapping = OrderMappingService(db).create_mapping(
            request.order_a,
            request.order_b,
            mapping_type=request.mapping_type,
            confidence=request.confidence,
            notes=request.notes,
            mapped_by=request.mapped_by,
        )
    except MappingConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidMappingError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Creating mapping failed: {str(e)}")

    return OrderMappingSchema.model_validate(mapping)


@router.post("/accept", response_model=OrderMappingSchema, status_code=201)
def accept_candidate(
    request: AcceptCandidateRequest,
    db: Session = Depends(get_db),
    config: MatchingConfig = Depends(get_matching_config),
):
    """Accept a proposed pair as a 'suggested' mapping.

    The pair is re-scored so the stored confidence never comes from the client.
    Pairs the matcher would not propose are rejected with 422.
    """
    order_a = Order.from_dict(request.order_a, source=OrderSource.WOOCOMMERCE)
    order_b = Order.from_dict(request.order_b, source=OrderSource.ONGOING_WMS)
    result = OrderPairScorer(config).score(order_a, order_b)
    if result["confidence"] < config.min_confidence:
        raise HTTPException(
            status_code=422,
            detail=(
                f"Pair scores {result['confidence']}, below the minimum confidence "
                f"{config.min_confidence}; create a manual mapping instead"
            ),
        )
    candidate = OrderMappingCandidate(
        order_a=order_a,
        order_b=order_b,
        confidence=result["confidence"],
        match_reason=result["match_reason"],
        signals=result["signals"],
    )

    try:
        mapping = OrderMappingService(db).accept_candidate(
            candidate,
            mapped_by=request.mapped_by,
            notes=request.notes,
        )
    except MappingConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidMappingError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Accepting candidate failed: {str(e)}")

    return OrderMappingSchema.model_validate(mapping)


@router.patch("/{mapping_id}", response_model=OrderMappingSchema)
def update_mapping(mapping_id: str, request: UpdateMappingRequest, db: Session = Depends(get_db)):
    """Change type, confidence or notes of a mapping."""
    try:
        mapping = OrderMappingService(db).update_mapping(
            mapping_id, **request.model_dump(exclude_unset=True)
        )
    except MappingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidMappingError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Updating mapping failed: {str(e)}")

    return OrderMappingSchema.model_validate(mapping)


@router.post("/{mapping_id}/deactivate", response_model=OrderMappingSchema)
def deactivate_mapping(mapping_id: str, db: Session = Depends(get_db)):
    """Deactivate a mapping. The record is kept for audit."""
    try:
        mapping = OrderMappingService(db).deactivate_mapping(mapping_id)
    except MappingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Deactivating mapping failed: {str(e)}")

    return OrderMappingSchema.model_validate(mapping)
