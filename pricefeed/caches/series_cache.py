"""
Chart series cache for one market.

Holds the YES series and the latest live tick for the selected market:
- Serialized writes (history loads and tick merges share one lock)
- Immutable snapshots for readers
- Subject switch discards the series
"""

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Optional

from ..series import derive_inverse, merge_tick, normalize, rebase_tick
from ..series.normalize import ObservationLike
from ..types import EMPTY_SERIES, MarketSubject, Series, Tick

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SeriesSnapshot:
    """
    Consistent view of the cache at one sequence number.
    """
    subject: Optional[MarketSubject]
    yes_series: Series
    latest_tick: Optional[Tick]
    seq: int

    @property
    def no_series(self) -> Series:
        """NO outcome series, derived from YES."""
        return derive_inverse(self.yes_series)


class SeriesCache:
    """
    Series cache for the currently selected market.

    Thread-safe: writers are serialized so every merge sees the tail left by
    the previous one. Readers get immutable snapshots and never block long.
    """

    def __init__(self, subject: Optional[MarketSubject] = None):
        self._lock = threading.Lock()
        self._subject = subject
        self._yes: Series = EMPTY_SERIES
        self._latest_tick: Optional[Tick] = None
        self._seq = 0

    def set_subject(self, subject: MarketSubject) -> None:
        """
        Select the market to track.

        Switching to a different market clears the series and latest tick.
        """
        with self._lock:
            if subject == self._subject:
                return
            logger.info(f"SeriesCache: subject -> {subject.condition_id[:20]}")
            self._subject = subject
            self._yes = EMPTY_SERIES
            self._latest_tick = None
            self._seq += 1

    def load_history(
        self,
        observations: Iterable[ObservationLike],
        subject: Optional[MarketSubject] = None,
    ) -> Series:
        """
        Replace the series with normalized history.

        If a live tick was seen before this load, it is re-applied on top
        of the new history (lifted to the tail time if it is older).

        Args:
            observations: History batch
            subject: Market the history was fetched for; if set and no
                longer the selected market, the batch is discarded

        Returns:
            The current YES series
        """
        base = normalize(observations)
        with self._lock:
            if subject is not None and subject != self._subject:
                logger.debug("SeriesCache: discarding history for previous market")
                return self._yes
            tick = self._latest_tick
            if tick is not None:
                tick = rebase_tick(base, tick)
                self._latest_tick = tick
                base = merge_tick(base, tick)
            self._yes = base
            self._seq += 1
            logger.debug(f"SeriesCache: loaded {len(base)} points (seq={self._seq})")
            return base

    def apply_tick(self, tick: Tick) -> bool:
        """
        Merge a live tick into the series.

        Rejected ticks (non-finite or stale) leave the series unchanged and
        are not remembered as the latest tick.

        Returns:
            True if the tick was merged
        """
        with self._lock:
            merged = merge_tick(self._yes, tick)
            if merged is self._yes:
                return False
            self._yes = merged
            self._latest_tick = tick
            self._seq += 1
            return True

    def snapshot(self) -> SeriesSnapshot:
        """Read a consistent snapshot."""
        with self._lock:
            return SeriesSnapshot(
                subject=self._subject,
                yes_series=self._yes,
                latest_tick=self._latest_tick,
                seq=self._seq,
            )

    @property
    def subject(self) -> Optional[MarketSubject]:
        """Currently selected market."""
        return self._subject

    @property
    def yes_series(self) -> Series:
        """Current YES series."""
        return self._yes

    @property
    def no_series(self) -> Series:
        """Current NO series."""
        return derive_inverse(self._yes)

    @property
    def latest_tick(self) -> Optional[Tick]:
        """Last accepted live tick."""
        return self._latest_tick

    @property
    def seq(self) -> int:
        """Change counter; bumps on every accepted write."""
        return self._seq

    @property
    def has_data(self) -> bool:
        """Check if the series has any points."""
        return len(self._yes) > 0
