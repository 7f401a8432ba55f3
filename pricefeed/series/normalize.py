"""
History normalization.

Turns a raw batch of history observations into an ascending-time chart
series. Total over any input: malformed entries are dropped, never raised.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Optional, Union

from ..types import EMPTY_SERIES, Observation, Point, Series
from ..types.utils import clamp_probability, is_finite_number

logger = logging.getLogger(__name__)

ObservationLike = Union[Observation, Mapping]


def _coerce(item: object) -> Optional[Observation]:
    """Observation or {"t", "p"} mapping to Observation, else None."""
    if isinstance(item, Observation):
        return item
    if isinstance(item, Mapping):
        return Observation.from_dict(item)
    return None


def normalize(observations: Iterable[ObservationLike]) -> Series:
    """
    Build a chart series from history observations.

    - Drops entries whose t or p is not a finite number
    - Stable-sorts by t ascending (ties keep input order, no dedup)
    - Clamps p into [0, 1]

    Args:
        observations: Observation objects or {"t": ..., "p": ...} dicts

    Returns:
        Series (possibly empty)
    """
    if observations is None or isinstance(observations, (str, bytes)):
        return EMPTY_SERIES
    try:
        items = list(observations)
    except TypeError:
        return EMPTY_SERIES

    valid = []
    for item in items:
        obs = _coerce(item)
        if obs is None or not is_finite_number(obs.t) or not is_finite_number(obs.p):
            continue
        valid.append(obs)

    dropped = len(items) - len(valid)
    if dropped:
        logger.debug(f"normalize: dropped {dropped} invalid observations of {len(items)}")

    # sorted() is stable
    ordered = sorted(valid, key=lambda obs: obs.t)
    return tuple(Point(time=obs.t, value=clamp_probability(obs.p)) for obs in ordered)
