"""
Price feed types.

Example:
    from pricefeed.types import Point, Tick, Series
    from pricefeed.types.utils import clamp_probability
"""

# Series types
from .series import (
    Observation,
    Point,
    Tick,
    Series,
    EMPTY_SERIES,
)

# Market types
from .market import (
    MarketSubject,
    AssetPrice,
)

# Utility functions
from .utils import (
    wall_ms,
    is_finite_number,
    clamp,
    clamp_probability,
    resolve_tick_time,
)

__all__ = [
    # Series
    "Observation",
    "Point",
    "Tick",
    "Series",
    "EMPTY_SERIES",
    # Market
    "MarketSubject",
    "AssetPrice",
    # Utilities
    "wall_ms",
    "is_finite_number",
    "clamp",
    "clamp_probability",
    "resolve_tick_time",
]
