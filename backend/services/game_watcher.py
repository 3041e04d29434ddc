"""Drives the engines from the poll loop for the currently selected game."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable, Protocol, Sequence

from models import (
    HypeState,
    LiveFeed,
    Moment,
    OnePlayState,
    PlayCategory,
    WinProbabilitySample,
    extract_last_sample,
)
from services import texts
from services.errors import MalformedDataError, OnePlayRejected, TransientFetchError
from services.hype_engine import HypeEngine
from services.moment_detector import MomentDetector
from services.one_play import OnePlayEngine
from services.poll_coordinator import IDLE_INTERVAL_SECONDS, LIVE_INTERVAL_SECONDS, PollCoordinator, PollToken
from services.state_hub import SELECTED_TYPE, StateHub
from services.storage import RecordStore

logger = logging.getLogger(__name__)

# Per-source failures that only blank out that source for one cycle.
_DEGRADABLE = (TransientFetchError, MalformedDataError)


class LiveDataSource(Protocol):
    async def fetch_live_feed(self, game_id: str) -> Any: ...

    async def fetch_win_probability(self, game_id: str) -> Any: ...


@dataclass(frozen=True)
class LiveSnapshot:
    game_id: str
    feed: LiveFeed | None
    sample: WinProbabilitySample | None


def hype_payload(state: HypeState) -> dict[str, Any]:
    return {"type": "hype", **asdict(state), "level": state.level.value}


def moments_payload(moments: Sequence[Moment]) -> dict[str, Any]:
    return {"type": "moments", "moments": [m.to_record() for m in moments]}


def one_play_payload(state: OnePlayState | None, badge: str | None) -> dict[str, Any]:
    return {
        "type": "one_play",
        "state": state.to_record() if state is not None else None,
        "badge": badge,
    }


class GameWatcher:
    """
    One client session: a selected game, its poll loop and the three engines.

    Each applied snapshot always updates hype; while live it also feeds the
    moment detector, and while a prediction is pending the one-play engine
    sees the plays (including the final fetch, so the last play still counts).
    """

    def __init__(
        self,
        source: LiveDataSource,
        store: RecordStore,
        *,
        hub: StateHub | None = None,
        lang: str = texts.DEFAULT_LANG,
        user_id: str = "local",
        live_interval: float = LIVE_INTERVAL_SECONDS,
        idle_interval: float = IDLE_INTERVAL_SECONDS,
        reduced_motion: bool = False,
        debug: bool = False,
        now: Callable[[], float] = time.time,
        today: Callable[[], str] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._source = source
        self._store = store
        self._hub = hub
        self._channel = f"session-{user_id}"
        self._lang = texts.normalize_lang(lang)
        self._now = now
        self._game_id: str | None = None
        self._feed: LiveFeed | None = None
        self._moments: MomentDetector | None = None
        self._hype = HypeEngine(
            lang=self._lang,
            vibrate=self._vibrate if hub is not None else None,
            reduced_motion=reduced_motion,
            now=now,
        )
        one_play_kwargs: dict[str, Any] = {"user_id": user_id, "lang": self._lang, "debug": debug}
        if today is not None:
            one_play_kwargs["today"] = today
        self._one_play = OnePlayEngine(store, **one_play_kwargs)
        self._coordinator: PollCoordinator[LiveSnapshot] = PollCoordinator(
            self._fetch,
            self._apply,
            on_error=self._on_fetch_error,
            live_interval=live_interval,
            idle_interval=idle_interval,
            sleep=sleep,
        )

    @property
    def game_id(self) -> str | None:
        return self._game_id

    @property
    def channel(self) -> str:
        """Hub channel carrying this session's payloads across game switches."""
        return self._channel

    @property
    def lang(self) -> str:
        return self._lang

    @property
    def coordinator(self) -> PollCoordinator[LiveSnapshot]:
        return self._coordinator

    @property
    def hype_state(self) -> HypeState:
        return self._hype.state

    @property
    def moments(self) -> list[Moment]:
        return self._moments.moments if self._moments is not None else []

    @property
    def one_play(self) -> OnePlayState | None:
        return self._one_play.state

    @property
    def badge(self) -> str | None:
        return self._one_play.badge

    @property
    def is_live(self) -> bool:
        return self._feed is not None and self._feed.is_live

    def options(self) -> tuple[PlayCategory, ...]:
        if self._game_id is None:
            return ()
        return self._one_play.options_for(self._game_id)

    def select(self, game_id: str) -> None:
        """Switch to (or refresh) ``game_id``; persisted state is reconciled on switch."""
        if game_id != self._game_id:
            self._game_id = game_id
            self._feed = None
            self._hype.reset()
            self._publish_selected()
            self._moments = MomentDetector(self._store, game_id, lang=self._lang, now=self._now)
            self._one_play.load(game_id)
            self._publish(moments_payload(self._moments.moments))
            self._publish_one_play()
        self._coordinator.start(game_id)

    def stop(self) -> None:
        self._coordinator.stop()
        was_selected = self._game_id is not None
        self._game_id = None
        self._feed = None
        self._moments = None
        if was_selected:
            self._publish_selected()

    async def aclose(self) -> None:
        await self._coordinator.aclose()

    async def _fetch(self, game_id: str) -> LiveSnapshot:
        feed_raw, wp_raw = await asyncio.gather(
            self._source.fetch_live_feed(game_id),
            self._source.fetch_win_probability(game_id),
            return_exceptions=True,
        )
        for result in (feed_raw, wp_raw):
            if isinstance(result, BaseException) and not isinstance(result, _DEGRADABLE):
                raise result
        if isinstance(feed_raw, BaseException) and isinstance(wp_raw, BaseException):
            raise TransientFetchError(f"no live data for {game_id}: {feed_raw}") from feed_raw
        if isinstance(feed_raw, BaseException):
            logger.warning("[watcher] Live feed unavailable for %s: %s", game_id, feed_raw)
        if isinstance(wp_raw, BaseException):
            logger.warning("[watcher] Win probability unavailable for %s: %s", game_id, wp_raw)
        return LiveSnapshot(
            game_id=game_id,
            feed=None if isinstance(feed_raw, BaseException) else LiveFeed.from_raw(feed_raw),
            sample=None if isinstance(wp_raw, BaseException) else extract_last_sample(wp_raw),
        )

    def _apply(self, token: PollToken, snap: LiveSnapshot) -> None:
        feed = snap.feed
        if feed is not None:
            self._feed = feed
        is_live = feed.is_live if feed is not None else False
        is_final = feed.is_final if feed is not None else False

        self._coordinator.set_live(is_live)
        state = self._hype.update(
            snap.sample,
            is_live=is_live,
            is_final=is_final,
            inning=feed.current_inning if feed is not None else None,
            inning_state=feed.inning_state if feed is not None else "",
        )
        self._publish(hype_payload(state))

        if is_live and self._moments is not None:
            if self._moments.observe(snap.sample, level=state.level, is_live=True) is not None:
                self._publish(moments_payload(self._moments.moments))

        if feed is not None and (is_live or is_final) and self._one_play.is_pending:
            before = self._one_play.state
            if before is not None and before.game_id == snap.game_id:
                if self._one_play.observe(feed.plays) != before:
                    self._publish_one_play()

        if is_final:
            logger.info("[watcher] Game %s is final; polling stopped", snap.game_id)
            self._coordinator.stop()

    def _on_fetch_error(self, token: PollToken, exc: Exception) -> None:
        self._publish(hype_payload(self._hype.fail()))

    def _vibrate(self, pattern: Sequence[int]) -> None:
        self._publish({"type": "haptic", "pattern": list(pattern)})

    def _publish(self, payload: dict[str, Any]) -> None:
        if self._hub is not None and self._game_id is not None:
            self._hub.publish_nowait(self._channel, {**payload, "game_id": self._game_id})

    def _publish_selected(self) -> None:
        if self._hub is not None:
            self._hub.publish_nowait(self._channel, {"type": SELECTED_TYPE, "game_id": self._game_id})

    def _publish_one_play(self) -> None:
        self._publish(one_play_payload(self._one_play.state, self._one_play.badge))

    def _require_game(self) -> str:
        if self._game_id is None:
            raise OnePlayRejected("no game selected")
        return self._game_id

    def commit_choice(self, choice: PlayCategory | str) -> OnePlayState:
        game_id = self._require_game()
        feed = self._feed
        state = self._one_play.commit_choice(
            choice,
            game_id=game_id,
            is_live=feed is not None and feed.is_live,
            baseline_sequence=feed.last_completed_sequence if feed is not None else -1,
        )
        self._publish_one_play()
        return state

    def force_outcome(self, category: PlayCategory | str) -> OnePlayState:
        self._require_game()
        state = self._one_play.force_outcome(category)
        self._publish_one_play()
        return state

    def reset_one_play(self) -> None:
        self._one_play.reset()
        self._publish_one_play()

    def reveal_moment(self, moment_id: str) -> Moment | None:
        if self._moments is None:
            return None
        moment = self._moments.reveal(moment_id)
        if moment is not None:
            self._publish(moments_payload(self._moments.moments))
        return moment
