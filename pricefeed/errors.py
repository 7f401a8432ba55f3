"""Custom exceptions for the price feed."""


class PriceFeedError(Exception):
    """Base exception for price feed errors."""
    pass


class HistoryAPIError(PriceFeedError):
    """Raised when the price history endpoint fails."""
    pass


class StreamError(PriceFeedError):
    """Raised when the price stream cannot be opened."""
    pass


class ConfigurationError(PriceFeedError):
    """Raised when configuration is invalid."""
    pass
