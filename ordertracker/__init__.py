"""Order Tracker: demo order-tracking web service."""

__version__ = "0.1.0"
