"""Order mapping errors."""


class OrderMappingError(Exception):
    """Base exception for order mapping operations."""
    pass


class MappingNotFoundError(OrderMappingError):
    """No mapping with the given id exists."""
    pass


class MappingConflictError(OrderMappingError):
    """An active mapping already links the same pair of orders."""
    pass


class InvalidMappingError(OrderMappingError, ValueError):
    """Mapping fields failed validation (type, confidence range, missing ids)."""
    pass
