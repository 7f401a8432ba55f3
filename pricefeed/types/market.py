"""
Market identity and live price types.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class MarketSubject:
    """
    The market a chart series is tracking.

    A series belongs to exactly one subject; switching subject discards it.
    """
    condition_id: str
    yes_token_id: str
    no_token_id: str = ""


@dataclass(slots=True)
class AssetPrice:
    """
    Latest known price fields for one outcome token.

    Built up from partial stream updates: a field is only replaced when an
    update carries a valid value for it.
    Prices are decimals (0-1).
    """
    condition_id: str = ""
    best_bid: Optional[float] = None
    best_ask: Optional[float] = None
    last_trade_price: Optional[float] = None
    timestamp: Optional[str] = None
    last_trade_timestamp: Optional[str] = None

    @property
    def updated_at(self) -> Optional[str]:
        """Book timestamp, else last trade timestamp."""
        return self.timestamp or self.last_trade_timestamp
