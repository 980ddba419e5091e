"""Risk and stock report API."""
