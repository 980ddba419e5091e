"""Order snapshots, status vocabularies and date parsing."""

from .models import Order, OrderLine, ProductRef
from .status import (
    OrderSource,
    WooStatus,
    OngoingStatus,
    OPEN_WOO_STATUSES,
    ongoing_status_label,
    is_open_status,
)
from .dates import parse_datetime, format_date_iso

__all__ = [
    "Order",
    "OrderLine",
    "ProductRef",
    "OrderSource",
    "WooStatus",
    "OngoingStatus",
    "OPEN_WOO_STATUSES",
    "ongoing_status_label",
    "is_open_status",
    "parse_datetime",
    "format_date_iso",
]
