"""Order mapping SQLAlchemy model.

Links a WooCommerce order to its Ongoing WMS counterpart.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, Text, Index, text
from sqlalchemy.sql import func

from .base import Base, PortableJSONB

MAPPING_TYPES = ("exact", "manual", "suggested")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderMapping(Base):
    """Confirmed link between an order in each system.

    Mapping types:
    - exact: Order numbers matched one-to-one
    - manual: Linked by hand by a user
    - suggested: Accepted from a matcher candidate

    Mappings are never deleted; deactivation keeps the audit trail.
    """
    __tablename__ = "order_mapping"
    __table_args__ = (
        Index("ix_order_mapping_pair", "woo_order_id", "ongoing_order_id"),
        # At most one active mapping per pair
        Index(
            "uq_order_mapping_active_pair",
            "woo_order_id",
            "ongoing_order_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
        # Rendered as ck_order_mapping_<name> by the metadata naming convention
        CheckConstraint("mapping_type IN ('exact', 'manual', 'suggested')", name="type"),
        CheckConstraint("confidence >= 0 AND confidence <= 100", name="confidence"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    woo_order_id = Column(Text, nullable=False, index=True)
    ongoing_order_id = Column(Text, nullable=False, index=True)

    # Denormalized for search
    customer_name = Column(Text, nullable=True)
    order_number = Column(Text, nullable=True)

    mapping_type = Column(String(16), nullable=False)
    confidence = Column(Integer, nullable=False, default=100)  # 0-100
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # Order snapshots at mapping time
    woo_order_data = Column(PortableJSONB, nullable=True)
    ongoing_order_data = Column(PortableJSONB, nullable=True)

    mapped_by = Column(Text, nullable=True)
    mapped_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow, server_default=func.now())

    @property
    def pair(self):
        return (self.woo_order_id, self.ongoing_order_id)

    def to_dict(self):
        """Convert order mapping to dictionary representation."""
        return {
            "id": self.id,
            "woo_order_id": self.woo_order_id,
            "ongoing_order_id": self.ongoing_order_id,
            "customer_name": self.customer_name,
            "order_number": self.order_number,
            "mapping_type": self.mapping_type,
            "confidence": self.confidence,
            "notes": self.notes,
            "is_active": self.is_active,
            "woo_order_data": self.woo_order_data,
            "ongoing_order_data": self.ongoing_order_data,
            "mapped_by": self.mapped_by,
            "mapped_at": self.mapped_at.isoformat() if self.mapped_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
