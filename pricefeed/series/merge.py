"""
Live tick merging.

Folds one live tick into an ascending-time series:
- tick earlier than the tail: stale, series unchanged
- tick at the tail time: tail value replaced (last write wins)
- tick later than the tail: appended

Callers serialize merges per series (single writer). The input series is
never modified; the returned series is the new canonical value.
"""

from ..types import Point, Series, Tick
from ..types.utils import clamp_probability, is_finite_number


def merge_tick(series: Series, tick: Tick) -> Series:
    """
    Merge a live tick into a series.

    Args:
        series: Current series (ascending time)
        tick: Live update

    Returns:
        Updated series, or the input series when the tick is rejected
    """
    if not is_finite_number(tick.time) or not is_finite_number(tick.price):
        return series

    point = Point(time=tick.time, value=clamp_probability(tick.price))

    if not series:
        return (point,)

    tail = series[-1]
    if tick.time < tail.time:
        return series
    if tick.time == tail.time:
        return (*series[:-1], point)
    return (*series, point)


def rebase_tick(series: Series, tick: Tick) -> Tick:
    """
    Lift a tick older than the series tail up to the tail time.

    Used when history is reloaded after a live tick arrived, so the live
    price replaces the reloaded tail instead of being dropped as stale.
    """
    if not series or not is_finite_number(tick.time):
        return tick
    tail_time = series[-1].time
    if tick.time < tail_time:
        return Tick(time=tail_time, price=tick.price)
    return tick
