"""MLB Stats API client: live feed and win-probability series."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from services.errors import MalformedDataError, TransientFetchError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://statsapi.mlb.com"
DEFAULT_TIMEOUT_SECONDS = 10.0


class MlbStatsClient:
    """
    Fetch JSON documents by URL. Every failure mode (transport error, non-2xx,
    undecodable body) surfaces as TransientFetchError.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_json(self, path: str) -> Any:
        logger.debug("[mlb] GET %s", path)
        try:
            response = await self._client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise TransientFetchError(f"{path}: HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise TransientFetchError(f"{path}: {type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise TransientFetchError(f"{path}: invalid JSON body") from exc

    async def fetch_live_feed(self, game_id: str) -> dict[str, Any]:
        doc = await self.get_json(f"/api/v1.1/game/{quote(str(game_id), safe='')}/feed/live")
        if not isinstance(doc, dict):
            raise MalformedDataError(f"live feed for {game_id} is not an object")
        return doc

    async def fetch_win_probability(self, game_id: str) -> list[Any]:
        series = await self.get_json(f"/api/v1/game/{quote(str(game_id), safe='')}/winProbability")
        if not isinstance(series, list):
            raise MalformedDataError(f"win probability for {game_id} is not a list")
        return series
