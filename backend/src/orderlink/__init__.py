"""OrderLink: order correlation and delivery risk for WooCommerce + Ongoing WMS."""

__version__ = "0.1.0"
