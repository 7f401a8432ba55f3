"""
Chart payload preparation.

Chart renderers require strictly ascending, unique times. Normalized
history may carry duplicate timestamps; they are collapsed here.
"""

from ..types import Series
from ..types.utils import is_finite_number


def to_chart_data(series: Series) -> list[dict]:
    """
    Convert a series to chart line data.

    Drops non-finite points and keeps the last value written for each time.

    Returns:
        List of {"time", "value"} dicts, ascending and unique by time
    """
    out: list[dict] = []
    for point in series:
        if not is_finite_number(point.time) or not is_finite_number(point.value):
            continue
        if out and out[-1]["time"] == point.time:
            out[-1] = point.to_dict()
        else:
            out.append(point.to_dict())
    return out
