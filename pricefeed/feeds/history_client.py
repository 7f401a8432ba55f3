"""
Price history client.

Fetches historical YES prices for a market from the backend:
GET /api/v1/markets/{condition_id}/history?range=1d -> [{"t": ..., "p": ...}]
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import aiohttp
import orjson

from ..errors import HistoryAPIError
from ..types import Observation

logger = logging.getLogger(__name__)


def parse_history_payload(data: Any) -> list[Observation]:
    """
    Convert a decoded history response into observations.

    A body that is not a list yields no observations; list items that are
    not objects are skipped. Field validation is left to normalize().
    """
    if not isinstance(data, list):
        return []
    return [Observation.from_dict(item) for item in data if isinstance(item, dict)]


class HistoryClient:
    """
    Client for the backend price history endpoint.
    """

    DEFAULT_BASE_URL = "http://localhost:8080"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout_s: float = 10.0):
        """
        Initialize the history client.

        Args:
            base_url: Backend API base URL
            timeout_s: Total request timeout
        """
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure HTTP session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def get_history(self, condition_id: str, range_: str = "1d") -> list[Observation]:
        """
        Get price history for a market's YES token.

        Args:
            condition_id: Market condition ID
            range_: History range (1h, 6h, 1d, 1w, 1m, all)

        Returns:
            Observations in server order (unvalidated)

        Raises:
            HistoryAPIError: On HTTP error, transport failure or invalid JSON
        """
        session = await self._ensure_session()
        url = f"{self._base_url}/api/v1/markets/{quote(condition_id, safe='')}/history"
        params = {"range": range_.lower()}

        try:
            async with session.get(url, params=params) as resp:
                if resp.status != 200:
                    text = await resp.text()
                    raise HistoryAPIError(f"Get history failed: {resp.status} - {text}")
                body = await resp.read()
        except aiohttp.ClientError as e:
            raise HistoryAPIError(f"Get history request failed: {e}")

        try:
            data = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise HistoryAPIError(f"Invalid history response: {e}")

        observations = parse_history_payload(data)
        logger.debug(f"HistoryClient: {len(observations)} observations for {condition_id[:20]}")
        return observations
