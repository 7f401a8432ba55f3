"""Tests for SeriesCache."""

import threading

from pricefeed.caches import SeriesCache
from pricefeed.types import MarketSubject, Point, Tick

MARKET_A = MarketSubject("cond_a", "yes_a", "no_a")
MARKET_B = MarketSubject("cond_b", "yes_b", "no_b")


class TestSeriesCache:
    """Tests for SeriesCache."""

    def test_initial_state(self):
        """Test initial state is empty."""
        cache = SeriesCache()
        assert cache.subject is None
        assert cache.yes_series == ()
        assert cache.latest_tick is None
        assert cache.seq == 0
        assert cache.has_data is False

    def test_load_history(self):
        """Test history is normalized into the YES series."""
        cache = SeriesCache(MARKET_A)
        series = cache.load_history([{"t": 5, "p": 0.4}, {"t": 2, "p": 0.5}])
        assert series == (Point(2, 0.5), Point(5, 0.4))
        assert cache.yes_series == series
        assert cache.has_data is True
        assert cache.seq == 1

    def test_no_series_derived(self):
        """Test the NO series mirrors YES."""
        cache = SeriesCache(MARKET_A)
        cache.load_history([{"t": 1, "p": 0.25}])
        assert cache.no_series == (Point(1, 0.75),)
        assert cache.snapshot().no_series == (Point(1, 0.75),)

    def test_apply_tick(self):
        """Test ticks replace or append and are remembered."""
        cache = SeriesCache(MARKET_A)
        cache.load_history([{"t": 10, "p": 0.6}])

        cache.apply_tick(Tick(time=10, price=0.7))
        assert cache.yes_series == (Point(10, 0.7),)

        cache.apply_tick(Tick(time=12, price=0.8))
        assert cache.yes_series == (Point(10, 0.7), Point(12, 0.8))
        assert cache.latest_tick == Tick(time=12, price=0.8)
        assert cache.seq == 3

    def test_rejected_tick_not_remembered(self):
        """Test stale and malformed ticks change nothing."""
        cache = SeriesCache(MARKET_A)
        cache.load_history([{"t": 10, "p": 0.6}])
        seq = cache.seq

        cache.apply_tick(Tick(time=5, price=0.9))
        cache.apply_tick(Tick(time=11, price=float("nan")))

        assert cache.yes_series == (Point(10, 0.6),)
        assert cache.latest_tick is None
        assert cache.seq == seq

    def test_history_reload_reapplies_latest_tick(self):
        """Test a reload keeps the live price on top of new history."""
        cache = SeriesCache(MARKET_A)
        cache.apply_tick(Tick(time=100, price=0.9))

        series = cache.load_history([{"t": 90, "p": 0.5}, {"t": 100, "p": 0.6}])
        assert series == (Point(90, 0.5), Point(100, 0.9))

    def test_history_reload_lifts_old_tick(self):
        """Test a tick older than the new tail replaces the tail."""
        cache = SeriesCache(MARKET_A)
        cache.apply_tick(Tick(time=95, price=0.9))

        series = cache.load_history([{"t": 90, "p": 0.5}, {"t": 100, "p": 0.6}])
        assert series == (Point(90, 0.5), Point(100, 0.9))
        assert cache.latest_tick == Tick(time=100, price=0.9)

    def test_history_reload_appends_newer_tick(self):
        """Test a tick newer than history is appended."""
        cache = SeriesCache(MARKET_A)
        cache.apply_tick(Tick(time=120, price=0.9))

        series = cache.load_history([{"t": 100, "p": 0.6}])
        assert series == (Point(100, 0.6), Point(120, 0.9))

    def test_set_subject_switch_clears(self):
        """Test switching market discards the series and tick."""
        cache = SeriesCache(MARKET_A)
        cache.load_history([{"t": 1, "p": 0.5}])
        cache.apply_tick(Tick(time=2, price=0.6))

        cache.set_subject(MARKET_B)

        assert cache.subject == MARKET_B
        assert cache.yes_series == ()
        assert cache.latest_tick is None

    def test_set_same_subject_keeps_series(self):
        """Test re-selecting the same market is a no-op."""
        cache = SeriesCache(MARKET_A)
        cache.load_history([{"t": 1, "p": 0.5}])
        seq = cache.seq

        cache.set_subject(MARKET_A)

        assert cache.yes_series == (Point(1, 0.5),)
        assert cache.seq == seq

    def test_snapshot_is_consistent(self):
        """Test snapshots are unaffected by later writes."""
        cache = SeriesCache(MARKET_A)
        cache.load_history([{"t": 1, "p": 0.5}])
        snap = cache.snapshot()

        cache.apply_tick(Tick(time=2, price=0.6))

        assert snap.yes_series == (Point(1, 0.5),)
        assert snap.seq == 1
        assert snap.subject == MARKET_A

    def test_concurrent_writers_keep_order(self):
        """Test serialized writes from several threads keep the series ordered."""
        cache = SeriesCache(MARKET_A)
        errors = []

        def writer(offset):
            try:
                for i in range(200):
                    cache.apply_tick(Tick(time=i * 3 + offset, price=0.5))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(k,)) for k in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        times = [p.time for p in cache.yes_series]
        assert times == sorted(times)
        assert len(times) == len(set(times))


class TestSeriesCacheWrites:
    """Tests for write results and stale history."""

    def test_apply_tick_reports_acceptance(self):
        """Test apply_tick returns whether the tick was merged."""
        cache = SeriesCache(MARKET_A)
        assert cache.apply_tick(Tick(time=10, price=0.6)) is True
        assert cache.apply_tick(Tick(time=10, price=0.7)) is True
        assert cache.apply_tick(Tick(time=12, price=0.8)) is True
        assert cache.apply_tick(Tick(time=5, price=0.9)) is False
        assert cache.apply_tick(Tick(time=13, price=float("inf"))) is False

    def test_load_history_for_previous_subject_discarded(self):
        """Test history fetched for a market no longer selected is dropped."""
        cache = SeriesCache(MARKET_A)
        cache.set_subject(MARKET_B)
        seq = cache.seq

        series = cache.load_history([{"t": 1, "p": 0.5}], subject=MARKET_A)

        assert series == ()
        assert cache.yes_series == ()
        assert cache.seq == seq

    def test_load_history_for_current_subject(self):
        """Test history for the selected market loads."""
        cache = SeriesCache(MARKET_A)
        series = cache.load_history([{"t": 1, "p": 0.5}], subject=MARKET_A)
        assert series == (Point(1, 0.5),)
