"""Persistence and API for confirmed order mappings."""

from .exceptions import (
    OrderMappingError,
    MappingNotFoundError,
    MappingConflictError,
    InvalidMappingError,
)
from .service import OrderMappingService

__all__ = [
    "OrderMappingError",
    "MappingNotFoundError",
    "MappingConflictError",
    "InvalidMappingError",
    "OrderMappingService",
]
