"""Normalization of order numbers and customer names before comparison."""

import re
from typing import Optional

_ORDER_NUMBER_SEPARATORS = re.compile(r"[\s\-_#/.]+")
_WHITESPACE = re.compile(r"\s+")


def normalize_order_number(value: Optional[str]) -> str:
    """Case-fold and strip separators from an order number.

    Leading zeros are kept: "#00123" and "123" are different orders.

    Examples:
        >>> normalize_order_number(" WC-1001 ")
        'wc1001'
        >>> normalize_order_number("#10/01")
        '1001'
    """
    if not value:
        return ""
    return _ORDER_NUMBER_SEPARATORS.sub("", str(value)).casefold()


def normalize_name(value: Optional[str]) -> str:
    """Case-fold a customer name and collapse whitespace."""
    if not value:
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip().casefold()
