"""
Cache modules for the price feed.

- SeriesCache: YES chart series and latest live tick for the selected market
"""

from .series_cache import SeriesCache, SeriesSnapshot

__all__ = [
    "SeriesCache",
    "SeriesSnapshot",
]
