"""Hype scoring: win-probability volatility -> 0-100 value, level and texts."""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Sequence

from models import (
    HOT_THRESHOLD,
    INSANE_THRESHOLD,
    WARM_THRESHOLD,
    HypeLevel,
    HypeState,
    WinProbabilitySample,
)
from services import texts

logger = logging.getLogger(__name__)

DRAMA_MAX = 320.0
LEVERAGE_MAX = 6.0
LEVERAGE_FULL_SCALE = 4.0
DRAMA_WEIGHT = 0.7
LEVERAGE_WEIGHT = 0.3

HAPTIC_COOLDOWN_SECONDS = 25.0
HAPTIC_PATTERNS: dict[HypeLevel, tuple[int, ...]] = {
    HypeLevel.CALM: (),
    HypeLevel.WARM: (30,),
    HypeLevel.HOT: (40, 60, 40),
    HypeLevel.INSANE: (80, 50, 80, 50, 120),
}

Vibrate = Callable[[Sequence[int]], None]


def _clamp(n: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, n))


def drama_score(drama_index: float | None) -> float | None:
    if drama_index is None:
        return None
    return math.sqrt(_clamp(drama_index, 0.0, DRAMA_MAX) / DRAMA_MAX) * 100.0


def leverage_score(leverage_index: float | None) -> float | None:
    if leverage_index is None:
        return None
    lev = _clamp(leverage_index, 0.0, LEVERAGE_MAX)
    return _clamp(lev / LEVERAGE_FULL_SCALE, 0.0, 1.0) * 100.0


def score(sample: WinProbabilitySample | None) -> float | None:
    """
    Combine drama and leverage into a 0-100 hype value.

    Either signal alone is used as-is; both are blended 70/30. Returns None
    when the sample carries neither, which callers render as "no data".
    """
    if sample is None:
        return None
    d = drama_score(sample.drama_index)
    lev = leverage_score(sample.leverage_index)
    if d is None and lev is None:
        return None
    if lev is None:
        return d
    if d is None:
        return lev
    return DRAMA_WEIGHT * d + LEVERAGE_WEIGHT * lev


def level_of(value: float) -> HypeLevel:
    if value >= INSANE_THRESHOLD:
        return HypeLevel.INSANE
    if value >= HOT_THRESHOLD:
        return HypeLevel.HOT
    if value >= WARM_THRESHOLD:
        return HypeLevel.WARM
    return HypeLevel.CALM


def _pct(value: float) -> int:
    return int(_clamp(value, 0.0, 100.0) + 0.5)


def inning_line(
    inning: int | None,
    inning_state: str = "",
    half: str | None = None,
    *,
    lang: str = texts.DEFAULT_LANG,
) -> str:
    if inning is None:
        return ""
    line = texts.text("inning", lang, inning=inning)
    ja = texts.normalize_lang(lang) == "ja"
    if inning_state:
        line += f"（{inning_state}）" if ja else f" ({inning_state})"
    if half:
        line += f"・{half}" if ja else f" · {half}"
    return line


def win_prob_line(sample: WinProbabilitySample | None, *, lang: str = texts.DEFAULT_LANG) -> str:
    if sample is None or sample.home_win_prob is None:
        return ""
    label = texts.text("label_wp", lang)
    home = f"{texts.text('home', lang)} {_pct(sample.home_win_prob)}%"
    if sample.away_win_prob is None:
        return f"{label}: {home}"
    away = f"{texts.text('away', lang)} {_pct(sample.away_win_prob)}%"
    return f"{label}: {home} · {away}"


def _join(*parts: str) -> str:
    return " · ".join(p for p in parts if p)


class HypeEngine:
    """
    Owns the last observed level and the haptic throttle for one client session.

    A haptic pulse fires only while live, only when the level rises above the
    previously observed one, and at most once per ``haptic_cooldown`` seconds.
    """

    def __init__(
        self,
        *,
        lang: str = texts.DEFAULT_LANG,
        vibrate: Vibrate | None = None,
        reduced_motion: bool = False,
        haptic_cooldown: float = HAPTIC_COOLDOWN_SECONDS,
        now: Callable[[], float] = time.time,
    ) -> None:
        self._lang = texts.normalize_lang(lang)
        self._vibrate = None if reduced_motion else vibrate
        self._cooldown = haptic_cooldown
        self._now = now
        self._last_level: HypeLevel | None = None
        self._last_pulse_at: float | None = None
        self._state = self.neutral()

    @property
    def state(self) -> HypeState:
        return self._state

    @property
    def last_level(self) -> HypeLevel | None:
        return self._last_level

    @property
    def haptics_enabled(self) -> bool:
        return self._vibrate is not None

    def neutral(self) -> HypeState:
        """Degraded display used when a poll cycle produced nothing."""
        return HypeState(
            value=0.0,
            level=HypeLevel.CALM,
            is_live=False,
            tag="",
            subtext="",
            narrative="",
        )

    def fail(self) -> HypeState:
        self._state = self.neutral()
        return self._state

    def reset(self) -> None:
        self._last_level = None
        self._last_pulse_at = None
        self._state = self.neutral()

    def update(
        self,
        sample: WinProbabilitySample | None,
        *,
        is_live: bool,
        is_final: bool = False,
        inning: int | None = None,
        inning_state: str = "",
    ) -> HypeState:
        lang = self._lang
        tag = texts.text("final", lang) if is_final else texts.text("live", lang) if is_live else ""
        if inning is None and sample is not None:
            inning = sample.inning
        inning_text = inning_line(inning, inning_state, sample.half if sample else None, lang=lang)

        if not is_live and not is_final:
            self._state = HypeState(
                value=0.0,
                level=HypeLevel.CALM,
                is_live=False,
                tag=tag,
                subtext=_join(inning_text, texts.text("waiting", lang)),
                narrative=texts.narrative(HypeLevel.CALM, lang),
                bump=self._observe(HypeLevel.CALM, is_live=False),
            )
            return self._state

        value = score(sample)
        wp_text = win_prob_line(sample, lang=lang)
        if value is None:
            subtext = _join(inning_text, wp_text or texts.text("no_data", lang))
            value = 0.0
        else:
            subtext = _join(inning_text, wp_text)

        level = level_of(value)
        self._state = HypeState(
            value=value,
            level=level,
            is_live=is_live,
            tag=tag,
            subtext=subtext,
            narrative=texts.narrative(level, lang),
            bump=self._observe(level, is_live=is_live),
        )
        return self._state

    def _observe(self, level: HypeLevel, *, is_live: bool) -> bool:
        previous = self._last_level
        self._last_level = level
        rose = previous is not None and level.rank > previous.rank
        if not (rose and is_live):
            return False
        self._maybe_pulse(level)
        return True

    def _maybe_pulse(self, level: HypeLevel) -> None:
        if self._vibrate is None:
            return
        now = self._now()
        if self._last_pulse_at is not None and now - self._last_pulse_at < self._cooldown:
            logger.debug("[hype] Haptic suppressed (%.1fs since last pulse)", now - self._last_pulse_at)
            return
        self._last_pulse_at = now
        logger.info("[hype] Haptic pulse for level=%s", level.value)
        self._vibrate(list(HAPTIC_PATTERNS[level]))
