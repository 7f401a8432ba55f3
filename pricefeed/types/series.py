"""
Chart series types.

Types for raw history observations, validated chart points and live ticks.
"""

from dataclasses import dataclass
from typing import Mapping

from .utils import is_finite_number

_NAN = float("nan")


@dataclass(frozen=True, slots=True)
class Observation:
    """
    Raw historical (time, probability) pair from the history endpoint.

    No ordering or validity guarantees; the normalizer filters and sorts.
    """
    t: float  # unix seconds
    p: float  # probability, nominally 0-1

    @classmethod
    def from_dict(cls, data: Mapping) -> "Observation":
        """
        Build from a ``{"t": ..., "p": ...}`` mapping.

        Missing or non-numeric fields become NaN so they are dropped later.
        """
        t = data.get("t")
        p = data.get("p")
        return cls(
            t=t if is_finite_number(t) else _NAN,
            p=p if is_finite_number(p) else _NAN,
        )


@dataclass(frozen=True, slots=True)
class Point:
    """
    Validated chart point. Value always in [0, 1].
    """
    time: float  # unix seconds
    value: float

    def to_dict(self) -> dict:
        """Chart payload form."""
        return {"time": self.time, "value": self.value}


@dataclass(frozen=True, slots=True)
class Tick:
    """
    Single live price update.
    """
    time: float  # unix seconds
    price: float


# Ascending-time ordered points. Tuples keep returned series immutable.
Series = tuple[Point, ...]

EMPTY_SERIES: Series = ()
