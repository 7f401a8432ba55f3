"""
Live price stream (server-sent events).

The backend pushes one JSON payload per asset update on
/api/v1/markets/stream. Payloads are partial: a field absent from an update
keeps its previous value. PriceStreamState keeps the merged latest view per
asset and builds chart ticks from it.

Reconnection is the caller's concern: PriceStreamClient.run() reads a single
connection and returns when it ends.
"""

import logging
import threading
from collections.abc import AsyncIterable
from typing import Callable, Optional, Union

import aiohttp
import orjson

from ..errors import StreamError
from ..pricing import MAX_DISPLAY_SPREAD, calculate_display_price
from ..types import AssetPrice, Tick
from ..types.utils import is_finite_number, resolve_tick_time

logger = logging.getLogger(__name__)

STREAM_PATH = "/api/v1/markets/stream"

_NUMERIC_FIELDS = ("best_bid", "best_ask", "last_trade_price")
_STRING_FIELDS = ("timestamp", "last_trade_timestamp")


class PriceStreamState:
    """
    Latest known prices per asset, merged from partial stream updates.

    Single writer (the stream reader), multiple readers.
    """

    def __init__(self, max_display_spread: float = MAX_DISPLAY_SPREAD):
        self._prices: dict[str, AssetPrice] = {}
        self._lock = threading.Lock()
        self._max_display_spread = max_display_spread
        self._message_count = 0
        self._error_count = 0

    def apply_message(self, data: Union[bytes, str]) -> Optional[str]:
        """
        Merge one stream payload.

        Numeric fields are taken only when they are finite numbers, string
        fields only when they are strings; anything else keeps the previous
        value.

        Args:
            data: Raw JSON payload

        Returns:
            Updated asset id, or None if the payload was malformed
        """
        try:
            payload = orjson.loads(data)
        except orjson.JSONDecodeError as e:
            self._error_count += 1
            logger.debug(f"PriceStream: parse error: {e}")
            return None

        if not isinstance(payload, dict):
            self._error_count += 1
            return None

        asset_id = payload.get("asset_id")
        if not isinstance(asset_id, str) or not asset_id:
            self._error_count += 1
            logger.debug("PriceStream: payload without asset_id")
            return None

        with self._lock:
            existing = self._prices.get(asset_id)
            condition_id = payload.get("condition_id")
            updated = AssetPrice(
                condition_id=(
                    condition_id
                    if isinstance(condition_id, str) and condition_id
                    else (existing.condition_id if existing else "")
                ),
            )
            for field_name in _NUMERIC_FIELDS:
                value = payload.get(field_name)
                if is_finite_number(value):
                    setattr(updated, field_name, float(value))
                elif existing is not None:
                    setattr(updated, field_name, getattr(existing, field_name))
            for field_name in _STRING_FIELDS:
                value = payload.get(field_name)
                if isinstance(value, str):
                    setattr(updated, field_name, value)
                elif existing is not None:
                    setattr(updated, field_name, getattr(existing, field_name))

            self._prices[asset_id] = updated
            self._message_count += 1

        return asset_id

    def get(self, asset_id: str) -> Optional[AssetPrice]:
        """Latest merged prices for an asset."""
        with self._lock:
            return self._prices.get(asset_id)

    def tick_for(self, asset_id: str, fallback_s: Optional[float] = None) -> Optional[Tick]:
        """
        Build a chart tick for an asset from its latest prices.

        Price follows the display rule (midpoint, or last trade when the
        spread is too wide). Time is the update timestamp in seconds,
        falling back to fallback_s (or now) when it is missing or invalid.

        Returns:
            Tick, or None if no display price is available
        """
        price = self.get(asset_id)
        if price is None:
            return None

        display = calculate_display_price(
            price.best_bid,
            price.best_ask,
            price.last_trade_price,
            context=f"{price.condition_id or asset_id}:{asset_id}",
            max_spread=self._max_display_spread,
        )
        if display is None:
            return None

        return Tick(time=resolve_tick_time(price.updated_at, fallback_s), price=display)

    def clear(self) -> None:
        """Forget all asset prices."""
        with self._lock:
            self._prices.clear()

    @property
    def message_count(self) -> int:
        """Payloads merged so far."""
        return self._message_count

    @property
    def error_count(self) -> int:
        """Malformed payloads skipped so far."""
        return self._error_count


class PriceStreamClient:
    """
    Reads the backend SSE price stream into a PriceStreamState.

    Each `data:` event is merged into the state and reported through
    on_update(asset_id). No reconnect: run() returns when the server closes
    the stream or stop() is called.
    """

    def __init__(
        self,
        base_url: str,
        state: PriceStreamState,
        on_update: Optional[Callable[[str], None]] = None,
        connect_timeout_s: float = 10.0,
    ):
        """
        Initialize the stream client.

        Args:
            base_url: Backend API base URL
            state: State to merge payloads into
            on_update: Called with the asset id after each merged payload
            connect_timeout_s: Connection timeout (the stream itself has none)
        """
        self._url = base_url.rstrip("/") + STREAM_PATH
        self._state = state
        self._on_update = on_update
        self._connect_timeout_s = connect_timeout_s
        self._session: Optional[aiohttp.ClientSession] = None
        self._stop_requested = False
        self._event_count = 0

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure HTTP session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=None, sock_connect=self._connect_timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    def stop(self) -> None:
        """Ask run() to return after the current event."""
        self._stop_requested = True

    async def run(self) -> int:
        """
        Read one stream connection to the end.

        Returns:
            Number of events dispatched

        Raises:
            StreamError: If the stream cannot be opened
        """
        self._stop_requested = False
        session = await self._ensure_session()
        logger.info(f"PriceStream: connecting to {self._url}")

        try:
            async with session.get(self._url, headers={"Accept": "text/event-stream"}) as resp:
                if resp.status != 200:
                    text = await resp.text()
                    raise StreamError(f"Stream open failed: {resp.status} - {text}")
                count = await self.consume(resp.content)
        except aiohttp.ClientError as e:
            raise StreamError(f"Stream request failed: {e}")

        logger.info(f"PriceStream: stream ended after {count} events")
        return count

    async def consume(self, lines: AsyncIterable[bytes]) -> int:
        """
        Dispatch SSE events from raw lines.

        `data:` lines are joined with newlines until a blank line ends the
        event. Comments and other fields are ignored.

        Returns:
            Number of events dispatched
        """
        count = 0
        data_lines: list[bytes] = []

        async for raw in lines:
            if self._stop_requested:
                break
            line = raw.rstrip(b"\r\n")
            if not line:
                if data_lines:
                    self._dispatch(b"\n".join(data_lines))
                    data_lines = []
                    count += 1
                continue
            if line.startswith(b"data:"):
                data_lines.append(line[5:].lstrip(b" "))

        # An event not terminated by a blank line is discarded
        self._event_count += count
        return count

    def _dispatch(self, data: bytes) -> None:
        asset_id = self._state.apply_message(data)
        if asset_id is not None and self._on_update is not None:
            self._on_update(asset_id)

    @property
    def event_count(self) -> int:
        """Events dispatched across all runs."""
        return self._event_count
