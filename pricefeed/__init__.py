"""
Price Feed - chart series for Polymarket binary markets

Normalizes price history into chart series, derives the NO outcome series
and merges live price ticks while streaming.
"""

__version__ = "0.1.0"

# Types
from .types import (
    Observation,
    Point,
    Tick,
    Series,
    EMPTY_SERIES,
    MarketSubject,
    AssetPrice,
    clamp_probability,
    resolve_tick_time,
)

# Series pipeline
from .series import (
    normalize,
    derive_inverse,
    merge_tick,
    rebase_tick,
    to_chart_data,
)

# Pricing
from .pricing import calculate_display_price, MAX_DISPLAY_SPREAD

# Cache
from .caches import SeriesCache, SeriesSnapshot

# Feeds
from .feeds import HistoryClient, PriceStreamClient, PriceStreamState

# Errors
from .errors import PriceFeedError, HistoryAPIError, StreamError, ConfigurationError

# Application
from .config import AppConfig
from .chart_feed import MarketChartFeed
from .util import setup_logging

__all__ = [
    # Version
    "__version__",
    # Types
    "Observation",
    "Point",
    "Tick",
    "Series",
    "EMPTY_SERIES",
    "MarketSubject",
    "AssetPrice",
    "clamp_probability",
    "resolve_tick_time",
    # Series pipeline
    "normalize",
    "derive_inverse",
    "merge_tick",
    "rebase_tick",
    "to_chart_data",
    # Pricing
    "calculate_display_price",
    "MAX_DISPLAY_SPREAD",
    # Cache
    "SeriesCache",
    "SeriesSnapshot",
    # Feeds
    "HistoryClient",
    "PriceStreamClient",
    "PriceStreamState",
    # Errors
    "PriceFeedError",
    "HistoryAPIError",
    "StreamError",
    "ConfigurationError",
    # Application
    "AppConfig",
    "MarketChartFeed",
    "setup_logging",
]
