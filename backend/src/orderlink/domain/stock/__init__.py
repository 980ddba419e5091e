"""Backorder severity classification and the backordered products report."""

from .severity import StockSeverity, classify_severity, severity_rank
from .backorders import (
    AffectedOrder,
    BackorderedProduct,
    BackorderReport,
    build_backorder_report,
)

__all__ = [
    "StockSeverity",
    "classify_severity",
    "severity_rank",
    "AffectedOrder",
    "BackorderedProduct",
    "BackorderReport",
    "build_backorder_report",
]
