"""Order status vocabularies of the two source systems.

WooCommerce uses string statuses (including the shop's custom
``delvis-levert`` status for partially delivered orders); Ongoing WMS uses
numeric status codes.
"""

from enum import Enum, IntEnum
from typing import Optional, Union


class OrderSource(str, Enum):
    """Source system an order was synced from."""
    WOOCOMMERCE = "woocommerce"
    ONGOING_WMS = "ongoing_wms"


class WooStatus(str, Enum):
    """WooCommerce order status."""
    PENDING = "pending"
    PROCESSING = "processing"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"
    PARTIALLY_DELIVERED = "delvis-levert"


class OngoingStatus(IntEnum):
    """Ongoing WMS order status codes."""
    OPEN = 200
    ON_HOLD = 210
    PICKING = 300
    ASSIGNED = 320
    PICKED = 400
    SENT = 450
    PARTIALLY_SENT = 451
    COLLECTED = 500
    WAITING_FOR_CUSTOMER = 600

    def label(self) -> str:
        return ONGOING_STATUS_LABELS[self]


ONGOING_STATUS_LABELS = {
    OngoingStatus.OPEN: "Open",
    OngoingStatus.ON_HOLD: "On Hold",
    OngoingStatus.PICKING: "Picking",
    OngoingStatus.ASSIGNED: "Assigned",
    OngoingStatus.PICKED: "Picked",
    OngoingStatus.SENT: "Sent",
    OngoingStatus.PARTIALLY_SENT: "Partially Sent",
    OngoingStatus.COLLECTED: "Collected",
    OngoingStatus.WAITING_FOR_CUSTOMER: "Waiting for customer",
}

# Statuses whose delivery is still outstanding
OPEN_WOO_STATUSES = frozenset({WooStatus.PROCESSING.value, WooStatus.PARTIALLY_DELIVERED.value})

OPEN_ONGOING_STATUSES = frozenset({
    OngoingStatus.OPEN,
    OngoingStatus.ON_HOLD,
    OngoingStatus.PICKING,
    OngoingStatus.ASSIGNED,
    OngoingStatus.PICKED,
    OngoingStatus.PARTIALLY_SENT,
    OngoingStatus.WAITING_FOR_CUSTOMER,
})


def ongoing_status_label(code: Optional[int]) -> str:
    """Display text for an Ongoing WMS status code.

    Examples:
        >>> ongoing_status_label(450)
        'Sent'
        >>> ongoing_status_label(999)
        'Unknown (999)'
    """
    try:
        return OngoingStatus(code).label()
    except ValueError:
        return f"Unknown ({code})"


def status_label(status: Union[str, int, None], source: OrderSource) -> str:
    if status is None:
        return "Unknown"
    if source == OrderSource.ONGOING_WMS:
        return ongoing_status_label(status)
    return str(status)


def is_open_status(status: Union[str, int, None], source: OrderSource) -> bool:
    """Whether an order in this status is still awaiting delivery."""
    if status is None:
        return False
    if source == OrderSource.ONGOING_WMS:
        try:
            return OngoingStatus(int(status)) in OPEN_ONGOING_STATUSES
        except (TypeError, ValueError, OverflowError):
            return False
    return str(status) in OPEN_WOO_STATUSES
