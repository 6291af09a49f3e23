"""Dutch auction engine: slot-based descending prices, bidding and settlement."""

__version__ = "0.1.0"
__all__ = ["errors", "events", "price", "state", "program"]