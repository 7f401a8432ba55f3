"""
Feed modules for the price feed.

- HistoryClient: historical prices over HTTP
- PriceStreamClient / PriceStreamState: live prices over SSE
"""

from .history_client import HistoryClient, parse_history_payload
from .price_stream import PriceStreamClient, PriceStreamState, STREAM_PATH

__all__ = [
    "HistoryClient",
    "parse_history_payload",
    "PriceStreamClient",
    "PriceStreamState",
    "STREAM_PATH",
]
