"""SQLAlchemy models."""

from .base import Base, PortableJSONB
from .order_mapping import OrderMapping, MAPPING_TYPES

__all__ = ["Base", "PortableJSONB", "OrderMapping", "MAPPING_TYPES"]
