"""Spike detection over live win-probability samples -> persisted moment feed."""

from __future__ import annotations

import logging
import time
from typing import Callable

from models import HypeLevel, Moment, WinProbabilitySample
from services import texts
from services.hype_engine import inning_line, win_prob_line
from services.storage import RecordStore, persist_and_verify, read_or_none

logger = logging.getLogger(__name__)

WP_SWING_THRESHOLD = 6.0
DRAMA_SPIKE_THRESHOLD = 120.0
LEVERAGE_SPIKE_THRESHOLD = 2.8
MOMENT_COOLDOWN_SECONDS = 20.0
MAX_MOMENTS = 25


def moments_key(game_id: str) -> str:
    return f"moments-{game_id}"


def is_spike(sample: WinProbabilitySample, delta: float, level: HypeLevel) -> bool:
    return (
        delta >= WP_SWING_THRESHOLD
        or (sample.drama_index is not None and sample.drama_index >= DRAMA_SPIKE_THRESHOLD)
        or (sample.leverage_index is not None and sample.leverage_index >= LEVERAGE_SPIKE_THRESHOLD)
        or level is HypeLevel.INSANE
    )


def headline_for(sample: WinProbabilitySample, delta: float, *, lang: str = texts.DEFAULT_LANG) -> str:
    if delta >= WP_SWING_THRESHOLD:
        return texts.text("wp_swing", lang, delta=delta)
    if sample.drama_index is not None:
        return texts.text("drama", lang, drama=sample.drama_index)
    if sample.leverage_index is not None:
        return texts.text("leverage", lang, leverage=sample.leverage_index)
    return texts.text("spike", lang)


class MomentDetector:
    """
    Turns live samples into a newest-first feed of at most ``max_moments``.

    Samples are identified by at-bat sequence: repeats of an already seen
    sequence are ignored. Accepted moments share one global cooldown.
    """

    def __init__(
        self,
        store: RecordStore,
        game_id: str,
        *,
        lang: str = texts.DEFAULT_LANG,
        now: Callable[[], float] = time.time,
        cooldown: float = MOMENT_COOLDOWN_SECONDS,
        max_moments: int = MAX_MOMENTS,
    ) -> None:
        self._store = store
        self._game_id = game_id
        self._key = moments_key(game_id)
        self._lang = lang
        self._now = now
        self._cooldown = cooldown
        self._max = max_moments
        self._moments = self._load()
        self._last_sequence: int | None = max(
            (m.at_bat_sequence for m in self._moments if m.at_bat_sequence is not None),
            default=None,
        )
        self._prev_home: float | None = None
        self._last_accepted_at = self._moments[0].timestamp if self._moments else None

    @property
    def game_id(self) -> str:
        return self._game_id

    @property
    def moments(self) -> list[Moment]:
        return list(self._moments)

    def _load(self) -> list[Moment]:
        records = read_or_none(self._store, self._key)
        if not isinstance(records, list):
            return []
        loaded = [m for m in (Moment.from_record(r) for r in records) if m is not None]
        return loaded[: self._max]

    def _persist(self) -> bool:
        return persist_and_verify(self._store, self._key, [m.to_record() for m in self._moments])

    def observe(
        self,
        sample: WinProbabilitySample | None,
        *,
        level: HypeLevel,
        is_live: bool,
    ) -> Moment | None:
        if not is_live or sample is None or sample.at_bat_sequence is None:
            return None
        seq = sample.at_bat_sequence
        if self._last_sequence is not None and seq <= self._last_sequence:
            return None
        self._last_sequence = seq

        home = sample.home_win_prob
        delta = 0.0
        if home is not None and self._prev_home is not None:
            delta = abs(home - self._prev_home)
        if home is not None:
            self._prev_home = home

        if not is_spike(sample, delta, level):
            return None

        now = self._now()
        if self._last_accepted_at is not None and now - self._last_accepted_at < self._cooldown:
            logger.debug(
                "[moments] Spike at at-bat %s suppressed (%.1fs since last moment)",
                seq,
                now - self._last_accepted_at,
            )
            return None

        moment = Moment(
            id=f"{self._game_id}-{seq}-{int(now * 1000)}",
            timestamp=now,
            level=level,
            headline=headline_for(sample, delta, lang=self._lang),
            subtext=inning_line(sample.inning, "", sample.half, lang=self._lang),
            reveal_detail=" · ".join(
                p for p in (sample.description or "", win_prob_line(sample, lang=self._lang)) if p
            ),
            at_bat_sequence=seq,
        )
        self._last_accepted_at = now
        self._moments = [moment, *self._moments][: self._max]
        self._persist()
        logger.info(
            "[moments] Moment recorded: game=%s at_bat=%s level=%s delta=%.1f headline=%s",
            self._game_id,
            seq,
            level.value,
            delta,
            moment.headline,
        )
        return moment

    def reveal(self, moment_id: str) -> Moment | None:
        """Toggle the revealed flag of one moment; None if it is not in the feed."""
        for moment in self._moments:
            if moment.id == moment_id:
                moment.revealed = not moment.revealed
                self._persist()
                return moment
        return None
