from __future__ import annotations

import asyncio
from typing import Any

import pytest

from models import PlayCategory
from services.errors import TransientFetchError

# Raw MLB play records that classify to each category.
_PLAY_RESULTS: dict[PlayCategory, dict[str, Any]] = {
    PlayCategory.HR: {"eventType": "home_run", "event": "Home Run"},
    PlayCategory.SB: {"eventType": "stolen_base_2b", "event": "Stolen Base 2B"},
    PlayCategory.K: {"eventType": "strikeout", "event": "Strikeout", "isOut": True},
    PlayCategory.BB: {"eventType": "walk", "event": "Walk"},
    PlayCategory.HIT: {"eventType": "single", "event": "Single"},
    PlayCategory.DP: {"eventType": "grounded_into_double_play", "event": "Grounded Into DP", "isOut": True},
    PlayCategory.ERROR: {"eventType": "field_error", "event": "Field Error"},
    PlayCategory.SAC: {"eventType": "sac_fly", "event": "Sac Fly", "isOut": True},
    PlayCategory.RUN: {"eventType": "wild_pitch", "event": "Wild Pitch"},
    PlayCategory.OUT: {"eventType": "field_out", "event": "Flyout", "isOut": True},
    PlayCategory.UNKNOWN: {"eventType": "game_advisory", "event": "Game Advisory"},
}


def make_play(sequence: int, category: PlayCategory, *, complete: bool = True) -> dict[str, Any]:
    return {
        "result": {**_PLAY_RESULTS[category], "description": f"{category.value} at {sequence}"},
        "about": {
            "atBatIndex": sequence,
            "isComplete": complete,
            "isScoringPlay": category in (PlayCategory.HR, PlayCategory.RUN),
        },
        "playEvents": [],
    }


def make_feed(
    *,
    state: str = "live",
    plays: list[dict[str, Any]] | None = None,
    inning: int | None = 7,
    inning_state: str = "Top",
) -> dict[str, Any]:
    status = {
        "live": {"statusCode": "I", "abstractGameState": "Live", "detailedState": "In Progress"},
        "preview": {"statusCode": "S", "abstractGameState": "Preview", "detailedState": "Scheduled"},
        "final": {"statusCode": "F", "abstractGameState": "Final", "detailedState": "Final"},
    }[state]
    return {
        "gameData": {"status": status},
        "liveData": {
            "linescore": {"currentInning": inning, "inningState": inning_state},
            "plays": {"allPlays": plays or []},
        },
    }


def make_wp(
    sequence: int,
    *,
    home: float | None = 50.0,
    drama: float | None = None,
    leverage: float | None = None,
    inning: int = 7,
    half: str = "top",
) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "about": {"atBatIndex": sequence, "inning": inning, "halfInning": half},
        "result": {"description": f"at-bat {sequence}"},
    }
    if home is not None:
        entry["homeTeamWinProbability"] = home
        entry["awayTeamWinProbability"] = 100.0 - home
    if drama is not None:
        entry["dramaIndex"] = drama
    if leverage is not None:
        entry["leverageIndex"] = leverage
    return entry


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


class ManualTicker:
    """Stand-in for asyncio.sleep: each sleeper waits until fire() is called."""

    def __init__(self) -> None:
        self.intervals: list[float] = []
        self._waiters: list[asyncio.Future[None]] = []

    async def __call__(self, seconds: float) -> None:
        self.intervals.append(seconds)
        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        await fut

    def fire(self) -> None:
        waiters, self._waiters = self._waiters, []
        for fut in waiters:
            if not fut.done():
                fut.set_result(None)


class FakeSource:
    """Live data source returning whatever documents the test set last."""

    def __init__(self) -> None:
        self.feed: dict[str, Any] | Exception = make_feed(state="preview")
        self.wp: list[dict[str, Any]] | Exception = []
        self.calls: list[str] = []

    async def fetch_live_feed(self, game_id: str) -> Any:
        self.calls.append(game_id)
        if isinstance(self.feed, Exception):
            raise self.feed
        return self.feed

    async def fetch_win_probability(self, game_id: str) -> Any:
        if isinstance(self.wp, Exception):
            raise self.wp
        return self.wp

    def fail(self) -> None:
        self.feed = TransientFetchError("feed down")
        self.wp = TransientFetchError("wp down")


async def settle(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def anyio_backend() -> str:
    # The helpers above are asyncio-specific; don't run anyio tests under trio.
    return "asyncio"
