"""
Display price rule for live ticks.

Polymarket displays the bid/ask midpoint unless the spread is wider than
$0.10, in which case the last traded price is shown instead.
"""

import logging
from typing import Optional

from .types.utils import is_finite_number

logger = logging.getLogger(__name__)

MAX_DISPLAY_SPREAD = 0.10

# Contexts already warned about a wide spread with no last trade
_warned_missing_last_trade: set[str] = set()


def _positive(value: Optional[float]) -> bool:
    return is_finite_number(value) and value > 0


def calculate_display_price(
    best_bid: Optional[float] = None,
    best_ask: Optional[float] = None,
    last_trade_price: Optional[float] = None,
    context: Optional[str] = None,
    max_spread: float = MAX_DISPLAY_SPREAD,
) -> Optional[float]:
    """
    Price to display for an outcome token.

    - Valid bid and ask (bid <= ask) with spread <= max_spread: midpoint
    - Wider spread: last trade price, or None if there is none
    - No usable book: last trade price, or None

    Args:
        best_bid: Best bid (0-1)
        best_ask: Best ask (0-1)
        last_trade_price: Last traded price (0-1)
        context: Identifier used to log the missing-last-trade warning once
        max_spread: Widest spread for which the midpoint is used

    Returns:
        Display price or None when no valid input is available
    """
    has_bid = _positive(best_bid)
    has_ask = _positive(best_ask)
    has_last_trade = _positive(last_trade_price)

    if has_bid and has_ask and best_bid <= best_ask:
        spread = best_ask - best_bid
        if spread > max_spread:
            if not has_last_trade:
                key = context or "unknown"
                if key not in _warned_missing_last_trade:
                    _warned_missing_last_trade.add(key)
                    logger.warning(
                        f"Spread exceeds {max_spread:.2f} but no last trade price is available "
                        f"(context={key}, bid={best_bid}, ask={best_ask}, spread={spread:.4f})"
                    )
                return None
            return last_trade_price
        return (best_bid + best_ask) / 2

    if has_last_trade:
        return last_trade_price

    return None
