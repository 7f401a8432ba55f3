"""
Market chart feed.

Wires history loading and live prices into the series cache for the
selected market:

    feed = MarketChartFeed(AppConfig.from_env())
    feed.select_market(MarketSubject(condition_id, yes_token_id, no_token_id))
    await feed.refresh_history()
    stream = feed.make_stream_client()
    await stream.run()        # ticks flow into the cache via on_asset_update
    data = feed.chart_data(show_no=True)
"""

import logging
from typing import Optional

from .caches import SeriesCache
from .config import AppConfig
from .errors import ConfigurationError, HistoryAPIError
from .feeds import HistoryClient, PriceStreamClient, PriceStreamState
from .series import to_chart_data
from .types import MarketSubject, Series

logger = logging.getLogger(__name__)


class MarketChartFeed:
    """
    Chart data source for one market at a time.

    Live updates for the YES token are merged into the YES series; the NO
    series is always derived from it.
    """

    def __init__(
        self,
        config: AppConfig,
        history_client: Optional[HistoryClient] = None,
        stream_state: Optional[PriceStreamState] = None,
    ):
        errors = config.validate()
        if errors:
            for error in errors:
                logger.error(f"Config error: {error}")
            raise ConfigurationError(f"Invalid configuration: {errors}")

        self._config = config
        self._history = history_client or HistoryClient(
            config.api_base_url,
            timeout_s=config.http_timeout_s,
        )
        self._stream_state = stream_state or PriceStreamState(
            max_display_spread=config.max_display_spread,
        )
        self._cache = SeriesCache()

        # Stats
        self._history_errors = 0
        self._ticks_accepted = 0

    def select_market(self, subject: MarketSubject) -> None:
        """Track a market. Switching markets discards the current series."""
        self._cache.set_subject(subject)

    async def refresh_history(self, range_: Optional[str] = None) -> Series:
        """
        Reload history for the selected market.

        A failed request is logged and leaves the current series as is.

        Args:
            range_: History range, defaults to the configured one

        Returns:
            The current YES series
        """
        subject = self._cache.subject
        if subject is None:
            logger.warning("MarketChartFeed: no market selected, skipping history")
            return self._cache.yes_series

        try:
            observations = await self._history.get_history(
                subject.condition_id,
                range_ or self._config.history_range,
            )
        except HistoryAPIError as e:
            self._history_errors += 1
            logger.warning(f"MarketChartFeed: history load failed: {e}")
            return self._cache.yes_series

        # Dropped by the cache if the market switched while in flight
        return self._cache.load_history(observations, subject=subject)

    def on_asset_update(self, asset_id: str) -> bool:
        """
        Stream callback: merge a tick when the YES token updates.

        The tick time falls back to the series tail, then to the latest
        tick, when the update carries no usable timestamp.

        Returns:
            True if a tick was merged into the series
        """
        subject = self._cache.subject
        if subject is None or asset_id != subject.yes_token_id:
            return False

        snap = self._cache.snapshot()
        if snap.yes_series:
            fallback_s = snap.yes_series[-1].time
        elif snap.latest_tick is not None:
            fallback_s = snap.latest_tick.time
        else:
            fallback_s = None

        tick = self._stream_state.tick_for(asset_id, fallback_s=fallback_s)
        if tick is None:
            return False

        accepted = self._cache.apply_tick(tick)
        if accepted:
            self._ticks_accepted += 1
        return accepted

    def make_stream_client(self) -> PriceStreamClient:
        """Stream client feeding this chart."""
        return PriceStreamClient(
            self._config.api_base_url,
            self._stream_state,
            on_update=self.on_asset_update,
            connect_timeout_s=self._config.http_timeout_s,
        )

    def chart_data(self, show_no: bool = False) -> dict[str, list[dict]]:
        """
        Chart payloads for the selected market.

        Returns:
            {"yes": [...]} plus "no" when show_no is set
        """
        snap = self._cache.snapshot()
        data = {"yes": to_chart_data(snap.yes_series)}
        if show_no:
            data["no"] = to_chart_data(snap.no_series)
        return data

    async def close(self) -> None:
        """Close the history client session."""
        await self._history.close()

    @property
    def cache(self) -> SeriesCache:
        """Underlying series cache."""
        return self._cache

    @property
    def stream_state(self) -> PriceStreamState:
        """Live price state shared with the stream client."""
        return self._stream_state

    @property
    def stats(self) -> dict:
        """Feed counters."""
        return {
            "history_errors": self._history_errors,
            "ticks_accepted": self._ticks_accepted,
            "stream_messages": self._stream_state.message_count,
            "stream_errors": self._stream_state.error_count,
            "seq": self._cache.seq,
        }
