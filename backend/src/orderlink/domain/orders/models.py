"""Order snapshots shared by the classifiers and the matcher.

Orders from both source systems share one logical shape. They are frozen
dataclasses: every matching or risk pass works on a stable snapshot that
the caller built from freshly fetched documents.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union

from .dates import parse_datetime
from .status import OrderSource, status_label


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    """Return the first non-None value among keys (camelCase or snake_case)."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    # NaN and infinity come through as strings like "NaN" or "1e400"
    return number if math.isfinite(number) else None


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    return int(number) if number is not None else None


def _to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class ProductRef:
    """Product as embedded in an order line.

    Attributes:
        id: Product document id
        external_id: Product id in the source system (WooCommerce/Ongoing)
        name: Product name
        sku: Article number, if any
        stock_quantity: Current stock; negative means backordered
        stock_status: Source system stock status text
        product_type: Shop product type ("produkttype")
    """
    id: Optional[str]
    name: Optional[str] = None
    sku: Optional[str] = None
    stock_quantity: Optional[int] = None
    stock_status: Optional[str] = None
    product_type: Optional[str] = None
    external_id: Optional[str] = None

    @property
    def is_backordered(self) -> bool:
        return self.stock_quantity is not None and self.stock_quantity < 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductRef":
        return cls(
            id=_to_str(data.get("id")),
            name=_to_str(data.get("name")),
            sku=_to_str(data.get("sku")),
            stock_quantity=_to_int(_pick(data, "stockQuantity", "stock_quantity")),
            stock_status=_to_str(_pick(data, "stockStatus", "stock_status")),
            product_type=_to_str(_pick(data, "produkttype", "productType", "product_type")),
            external_id=_to_str(_pick(
                data, "woocommerceId", "woocommerce_id", "ongoingProductId", "ongoing_product_id"
            )),
        )


@dataclass(frozen=True)
class OrderLine:
    """Single order line with delivery progress."""
    id: Optional[str]
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    sku: Optional[str] = None
    quantity: float = 0
    unit_price: float = 0.0
    delivered_quantity: float = 0
    delivery_status: str = "pending"
    product: Optional[ProductRef] = None

    @property
    def is_backordered(self) -> bool:
        return self.product is not None and self.product.is_backordered

    @property
    def outstanding_quantity(self) -> float:
        return max(self.quantity - self.delivered_quantity, 0)

    def references(self, product: ProductRef) -> bool:
        """Whether this line is for the given product."""
        if self.product is not None and self.product.id and self.product.id == product.id:
            return True
        if self.product_id is None:
            return False
        return self.product_id in {product.id, product.external_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderLine":
        product_data = data.get("product")
        return cls(
            id=_to_str(data.get("id")),
            product_id=_to_str(_pick(data, "productId", "product_id")),
            product_name=_to_str(_pick(data, "productName", "product_name", "name")),
            sku=_to_str(data.get("sku")),
            quantity=_to_float(data.get("quantity")) or 0,
            unit_price=_to_float(_pick(data, "unitPrice", "unit_price")) or 0.0,
            delivered_quantity=_to_float(_pick(data, "deliveredQuantity", "delivered_quantity")) or 0,
            delivery_status=_to_str(_pick(data, "deliveryStatus", "delivery_status")) or "pending",
            product=ProductRef.from_dict(product_data) if isinstance(product_data, dict) else None,
        )


@dataclass(frozen=True)
class Order:
    """Order snapshot from either source system.

    Attributes:
        id: Document id of the synced order
        order_number: Human order number
        customer_name: Customer display name
        total_value: Order total
        date_created: Creation timestamp (UTC)
        delivery_date: Promised delivery date (UTC), None if unscheduled
        status: WooCommerce status string or Ongoing WMS status code
        source: System the order was synced from
        lines: Order lines
    """
    id: Optional[str]
    order_number: Optional[str]
    customer_name: Optional[str] = None
    total_value: Optional[float] = None
    date_created: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    status: Union[str, int, None] = None
    source: OrderSource = OrderSource.WOOCOMMERCE
    lines: Tuple[OrderLine, ...] = field(default_factory=tuple)

    @property
    def status_label(self) -> str:
        return status_label(self.status, self.source)

    @property
    def backordered_lines(self) -> Tuple[OrderLine, ...]:
        return tuple(line for line in self.lines if line.is_backordered)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[OrderSource] = None) -> "Order":
        """Build an order from a synced document.

        Accepts the Firestore (camelCase) and the Supabase (snake_case) shape.
        Missing or unparseable fields become None rather than raising, so a
        single bad document never blocks a whole batch.
        """
        if source is None:
            raw_source = data.get("source")
            if raw_source == OrderSource.ONGOING_WMS.value or _pick(data, "ongoingStatus", "ongoing_status") is not None:
                source = OrderSource.ONGOING_WMS
            else:
                source = OrderSource.WOOCOMMERCE

        if source == OrderSource.ONGOING_WMS:
            status = _to_int(_pick(data, "ongoingStatus", "ongoing_status", "status"))
        else:
            status = _to_str(_pick(data, "wooStatus", "woo_status", "status"))

        raw_lines = _pick(data, "orderLines", "order_lines", "lineItems", "line_items")
        if not isinstance(raw_lines, (list, tuple)):
            raw_lines = ()
        lines = tuple(OrderLine.from_dict(line) for line in raw_lines if isinstance(line, dict))

        return cls(
            id=_to_str(data.get("id")),
            order_number=_to_str(_pick(data, "orderNumber", "order_number")),
            customer_name=_to_str(_pick(data, "customerName", "customer_name")),
            total_value=_to_float(_pick(data, "totalValue", "total_value")),
            date_created=parse_datetime(_pick(data, "dateCreated", "date_created")),
            delivery_date=parse_datetime(_pick(data, "deliveryDate", "delivery_date")),
            status=status,
            source=source,
            lines=lines,
        )

    def summary(self) -> Dict[str, Any]:
        """Compact snapshot stored alongside a mapping record."""
        return {
            "order_number": self.order_number,
            "customer_name": self.customer_name,
            "status": self.status,
            "total_value": self.total_value,
        }
