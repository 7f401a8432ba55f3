"""
Series pipeline: normalize history, derive the inverse, merge live ticks.

All functions are pure and never raise on malformed input.
"""

from .normalize import normalize
from .inverse import derive_inverse
from .merge import merge_tick, rebase_tick
from .render import to_chart_data

__all__ = [
    "normalize",
    "derive_inverse",
    "merge_tick",
    "rebase_tick",
    "to_chart_data",
]
