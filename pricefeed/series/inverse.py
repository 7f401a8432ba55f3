"""
Inverse (NO outcome) series.

For a binary market, P(NO) = 1 - P(YES).
"""

from ..types import Point, Series
from ..types.utils import clamp_probability


def derive_inverse(series: Series) -> Series:
    """
    Derive the complementary series: same times, value = clamp(1 - value).

    Preserves length and order.
    """
    return tuple(
        Point(time=point.time, value=clamp_probability(1.0 - clamp_probability(point.value)))
        for point in series
    )
