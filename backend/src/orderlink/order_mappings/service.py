"""Order mapping persistence.

Stores confirmed links between WooCommerce and Ongoing WMS orders and
feeds the active pairs back into the matcher so that mapped orders are
never proposed again.
"""

import logging
from typing import Any, Iterable, List, Optional, Set, Tuple, Union

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..domain.orders.models import Order
from ..domain.orders.status import OrderSource
from ..matching import (
    MappingPair,
    MatchingConfig,
    OrderMappingCandidate,
    confidence_band,
    find_mapping_candidates,
)
from ..models.order_mapping import MAPPING_TYPES, OrderMapping
from ..observability.metrics import (
    candidate_confidence_histogram,
    mapping_candidates_total,
    matching_runs_total,
    order_mappings_total,
)
from .exceptions import InvalidMappingError, MappingConflictError, MappingNotFoundError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("mapping_type", "confidence", "notes")


def _as_order(value: Union[Order, dict], source: OrderSource) -> Order:
    if isinstance(value, Order):
        return value
    if isinstance(value, dict):
        return Order.from_dict(value, source=source)
    raise InvalidMappingError(f"Expected an order, got {type(value).__name__}")


def validate_mapping_fields(mapping_type: Optional[str] = None, confidence: Any = None) -> None:
    """Validate mapping type and confidence.

    Raises:
        InvalidMappingError: If the type is unknown or confidence is not an
            integer within 0..100
    """
    if mapping_type is not None and mapping_type not in MAPPING_TYPES:
        raise InvalidMappingError(
            f"Unknown mapping type '{mapping_type}' (expected one of {', '.join(MAPPING_TYPES)})"
        )
    if confidence is not None:
        if isinstance(confidence, bool) or not isinstance(confidence, int):
            raise InvalidMappingError(f"Confidence must be an integer, got {confidence!r}")
        if not 0 <= confidence <= 100:
            raise InvalidMappingError(f"Confidence must be within 0..100, got {confidence}")


class OrderMappingService:
    """CRUD and matching entry point for order mappings."""

    def __init__(self, db: Session):
        self.db = db

    def get_existing_mappings(self) -> Set[MappingPair]:
        """Return (woo_order_id, ongoing_order_id) pairs of all active mappings."""
        rows = self.db.query(OrderMapping.woo_order_id, OrderMapping.ongoing_order_id).filter(
            OrderMapping.is_active.is_(True)
        ).all()
        return {(row[0], row[1]) for row in rows}

    def find_candidates(
        self,
        orders_a: Iterable[Any],
        orders_b: Iterable[Any],
        config: Optional[MatchingConfig] = None,
    ) -> List[OrderMappingCandidate]:
        """Run the matcher against a snapshot of the active mappings.

        Args:
            orders_a: WooCommerce orders (Order or raw dicts)
            orders_b: Ongoing WMS orders (Order or raw dicts)
            config: Matching weights and thresholds

        Returns:
            Ranked candidates, none of which is already mapped
        """
        existing = self.get_existing_mappings()
        candidates = find_mapping_candidates(orders_a, orders_b, existing, config)

        matching_runs_total.inc()
        for candidate in candidates:
            mapping_candidates_total.labels(band=confidence_band(candidate.confidence)).inc()
            candidate_confidence_histogram.observe(candidate.confidence)

        return candidates

    def create_mapping(
        self,
        order_a: Union[Order, dict],
        order_b: Union[Order, dict],
        mapping_type: str = "manual",
        confidence: int = 100,
        notes: Optional[str] = None,
        mapped_by: Optional[str] = None,
    ) -> OrderMapping:
        """Persist a mapping between two orders.

        Args:
            order_a: WooCommerce order
            order_b: Ongoing WMS order
            mapping_type: exact | manual | suggested
            confidence: 0-100
            notes: Free-text note
            mapped_by: User who created the mapping

        Returns:
            The created OrderMapping

        Raises:
            InvalidMappingError: If fields fail validation or an order has no id
            MappingConflictError: If an active mapping for the pair exists
        """
        woo_order = _as_order(order_a, OrderSource.WOOCOMMERCE)
        ongoing_order = _as_order(order_b, OrderSource.ONGOING_WMS)
        if not woo_order.id or not ongoing_order.id:
            raise InvalidMappingError("Both orders must have an id")
        validate_mapping_fields(mapping_type, confidence)

        existing = self.find_mapping(woo_order_id=woo_order.id, ongoing_order_id=ongoing_order.id)
        if existing is not None:
            raise MappingConflictError(
                f"Orders {woo_order.id} and {ongoing_order.id} are already mapped ({existing.id})"
            )

        mapping = OrderMapping(
            woo_order_id=woo_order.id,
            ongoing_order_id=ongoing_order.id,
            customer_name=woo_order.customer_name or ongoing_order.customer_name,
            order_number=woo_order.order_number or ongoing_order.order_number,
            mapping_type=mapping_type,
            confidence=confidence,
            notes=notes,
            is_active=True,
            woo_order_data=woo_order.summary(),
            ongoing_order_data=ongoing_order.summary(),
            mapped_by=mapped_by,
        )
        self.db.add(mapping)
        try:
            self.db.commit()
        except IntegrityError as e:
            # A concurrent writer created the active pair after our lookup
            self.db.rollback()
            raise MappingConflictError(
                f"Orders {woo_order.id} and {ongoing_order.id} are already mapped"
            ) from e
        self.db.refresh(mapping)

        order_mappings_total.labels(event="created", mapping_type=mapping_type).inc()
        logger.info(
            f"Created {mapping_type} mapping {woo_order.id} -> {ongoing_order.id}",
            extra={"mapping_id": mapping.id},
        )
        return mapping

    def accept_candidate(
        self,
        candidate: OrderMappingCandidate,
        mapped_by: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> OrderMapping:
        """Persist a matcher candidate as a 'suggested' mapping.

        The candidate's confidence is kept; its match reason becomes the note
        unless one is given.
        """
        return self.create_mapping(
            candidate.order_a,
            candidate.order_b,
            mapping_type="suggested",
            confidence=candidate.confidence,
            notes=notes if notes is not None else candidate.match_reason,
            mapped_by=mapped_by,
        )

    def list_mappings(
        self,
        search: Optional[str] = None,
        mapping_type: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Tuple[List[OrderMapping], int]:
        """List active mappings, newest first.

        Args:
            search: Case-insensitive match on customer name, order number or order ids
            mapping_type: Filter by mapping type
            page: Page number (1-indexed)
            page_size: Items per page

        Returns:
            (mappings on the page, total matching mappings)
        """
        query = self.db.query(OrderMapping).filter(OrderMapping.is_active.is_(True))

        if mapping_type:
            query = query.filter(OrderMapping.mapping_type == mapping_type)

        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                OrderMapping.customer_name.ilike(pattern),
                OrderMapping.order_number.ilike(pattern),
                OrderMapping.woo_order_id.ilike(pattern),
                OrderMapping.ongoing_order_id.ilike(pattern),
            ))

        total = query.count()
        offset = (page - 1) * page_size
        mappings = query.order_by(
            OrderMapping.mapped_at.desc(),
            OrderMapping.id,
        ).offset(offset).limit(page_size).all()
        return mappings, total

    def get_mapping(self, mapping_id: str) -> OrderMapping:
        """Fetch a mapping by id.

        Raises:
            MappingNotFoundError: If no mapping has this id
        """
        mapping = self.db.query(OrderMapping).filter(OrderMapping.id == mapping_id).first()
        if mapping is None:
            raise MappingNotFoundError(f"Order mapping {mapping_id} not found")
        return mapping

    def find_mapping(
        self,
        woo_order_id: Optional[str] = None,
        ongoing_order_id: Optional[str] = None,
    ) -> Optional[OrderMapping]:
        """Find the active mapping for an order (or for a pair when both ids are given).

        Raises:
            InvalidMappingError: If neither id is given
        """
        if not woo_order_id and not ongoing_order_id:
            raise InvalidMappingError("woo_order_id or ongoing_order_id is required")

        query = self.db.query(OrderMapping).filter(OrderMapping.is_active.is_(True))
        if woo_order_id:
            query = query.filter(OrderMapping.woo_order_id == woo_order_id)
        if ongoing_order_id:
            query = query.filter(OrderMapping.ongoing_order_id == ongoing_order_id)
        return query.order_by(OrderMapping.mapped_at.desc()).first()

    def update_mapping(self, mapping_id: str, **changes: Any) -> OrderMapping:
        """Update mapping_type, confidence or notes of a mapping.

        Raises:
            MappingNotFoundError: If no mapping has this id
            InvalidMappingError: If a field is not updatable or fails validation
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise InvalidMappingError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        validate_mapping_fields(changes.get("mapping_type"), changes.get("confidence"))

        mapping = self.get_mapping(mapping_id)
        for field_name, value in changes.items():
            if value is None and field_name != "notes":
                continue
            setattr(mapping, field_name, value)

        self.db.commit()
        self.db.refresh(mapping)
        logger.info(f"Updated mapping {mapping_id}", extra={"mapping_id": mapping_id})
        return mapping

    def deactivate_mapping(self, mapping_id: str) -> OrderMapping:
        """Mark a mapping inactive. Mappings are never deleted.

        Raises:
            MappingNotFoundError: If no mapping has this id
        """
        mapping = self.get_mapping(mapping_id)
        if mapping.is_active:
            mapping.is_active = False
            self.db.commit()
            self.db.refresh(mapping)
            order_mappings_total.labels(event="deactivated", mapping_type=mapping.mapping_type).inc()
            logger.info(f"Deactivated mapping {mapping_id}", extra={"mapping_id": mapping_id})
        return mapping
