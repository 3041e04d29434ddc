"""One-play prediction game: pick what the next play will be, once per day."""

from __future__ import annotations

import logging
from datetime import date as date_cls
from typing import Callable, Iterable

from models import OPTION_COUNT, OnePlayState, Outcome, Play, PlayCategory
from services import texts
from services.errors import OnePlayRejected
from services.play_classifier import classify
from services.prng import create_stream
from services.storage import RecordStore, persist_and_verify, read_or_none

logger = logging.getLogger(__name__)

FREQUENT_POOL: tuple[PlayCategory, ...] = (
    PlayCategory.OUT,
    PlayCategory.HIT,
    PlayCategory.BB,
    PlayCategory.K,
    PlayCategory.RUN,
)
SPICY_POOL: tuple[PlayCategory, ...] = (
    PlayCategory.HR,
    PlayCategory.SB,
    PlayCategory.DP,
    PlayCategory.ERROR,
)
UNION_POOL = FREQUENT_POOL + SPICY_POOL
DEFAULT_MAX_DRAWS = 60


def build_options(date: str, game_id: str, *, max_draws: int = DEFAULT_MAX_DRAWS) -> tuple[PlayCategory, ...]:
    """
    Four distinct categories for ``(date, game_id)``, identical on every device.

    Two come from the frequent pool and two from the spicy pool; if repeated
    collisions exhaust ``max_draws`` the remainder is backfilled from the union
    of both pools. The result is shuffled with the same seeded stream.
    """
    rand = create_stream(f"{date}:{game_id}:options")
    picked: list[PlayCategory] = []

    def draw_from(pool: tuple[PlayCategory, ...], count: int) -> None:
        wanted = len(picked) + count
        draws = 0
        while len(picked) < wanted and draws < max_draws:
            draws += 1
            candidate = pool[int(rand() * len(pool))]
            if candidate not in picked:
                picked.append(candidate)

    draw_from(FREQUENT_POOL, 2)
    draw_from(SPICY_POOL, 2)
    if len(picked) < OPTION_COUNT:
        draw_from(UNION_POOL, OPTION_COUNT - len(picked))
    for category in UNION_POOL:
        if len(picked) >= OPTION_COUNT:
            break
        if category not in picked:
            picked.append(category)

    for i in range(len(picked) - 1, 0, -1):
        j = int(rand() * (i + 1))
        picked[i], picked[j] = picked[j], picked[i]
    return tuple(picked)


def one_play_key(user_id: str, date: str) -> str:
    return f"oneplay-{user_id}-{date}"


def _today_iso() -> str:
    return date_cls.today().isoformat()


def _as_category(value: PlayCategory | str) -> PlayCategory:
    return value if isinstance(value, PlayCategory) else PlayCategory(str(value).strip().lower())


class OnePlayEngine:
    """
    Idle -> Committed -> Decided, one prediction per day per user.

    While Committed, the first completed play after ``baseline_sequence``
    decides the prediction if its category was offered; otherwise it is a
    no-contest and the engine waits for the play after it.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        user_id: str = "local",
        lang: str = texts.DEFAULT_LANG,
        today: Callable[[], str] = _today_iso,
        max_draws: int = DEFAULT_MAX_DRAWS,
        debug: bool = False,
    ) -> None:
        self._store = store
        self._user_id = user_id
        self._lang = lang
        self._today = today
        self._max_draws = max_draws
        self._debug = debug
        self._state: OnePlayState | None = None

    @property
    def state(self) -> OnePlayState | None:
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state is not None and not self._state.decided

    @property
    def badge(self) -> str | None:
        state = self._state
        if state is None or state.outcome is not Outcome.HIT:
            return None
        return texts.badge_for(state.choice, self._lang)

    def today(self) -> str:
        return self._today()

    def options_for(self, game_id: str) -> tuple[PlayCategory, ...]:
        if self._state is not None and self._state.game_id == game_id and self._state.date == self._today():
            return self._state.options
        return build_options(self._today(), game_id, max_draws=self._max_draws)

    def load(self, game_id: str) -> OnePlayState | None:
        """Re-read today's record; drop it when it belongs to another game."""
        record = read_or_none(self._store, one_play_key(self._user_id, self._today()))
        state = OnePlayState.from_record(record)
        if state is not None and state.game_id != game_id:
            logger.info(
                "[one_play] Discarding stored prediction for game %s (selected %s)",
                state.game_id,
                game_id,
            )
            state = None
        self._state = state
        return state

    def _set(self, state: OnePlayState) -> None:
        self._state = state
        persist_and_verify(self._store, one_play_key(self._user_id, state.date), state.to_record())

    def commit_choice(
        self,
        choice: PlayCategory | str,
        *,
        game_id: str,
        is_live: bool,
        baseline_sequence: int,
    ) -> OnePlayState:
        choice = _as_category(choice)
        today = self._today()
        if self._state is not None and self._state.date == today:
            raise OnePlayRejected("a prediction has already been made today")
        if not is_live:
            raise OnePlayRejected("predictions open only while the game is live")
        options = build_options(today, game_id, max_draws=self._max_draws)
        if choice not in options:
            raise OnePlayRejected(f"{choice.value} is not one of today's options")

        state = OnePlayState(
            date=today,
            game_id=game_id,
            options=options,
            choice=choice,
            baseline_sequence=baseline_sequence,
        )
        self._set(state)
        logger.info(
            "[one_play] Committed: game=%s choice=%s baseline=%d options=%s",
            game_id,
            choice.value,
            baseline_sequence,
            [o.value for o in options],
        )
        return state

    def _apply(self, state: OnePlayState, category: PlayCategory, sequence: int) -> OnePlayState:
        if category not in state.options:
            state = state.advance_past(sequence, category)
            logger.info(
                "[one_play] No contest: at_bat=%d category=%s skipped=%d",
                sequence,
                category.value,
                state.skipped_count,
            )
        else:
            state = state.resolve(category)
            logger.info(
                "[one_play] Decided: choice=%s actual=%s outcome=%s",
                state.choice.value,
                category.value,
                state.outcome.value if state.outcome else None,
            )
        self._set(state)
        return state

    def observe(self, plays: Iterable[Play]) -> OnePlayState | None:
        if not self.is_pending:
            return self._state
        completed = sorted(
            ((p.sequence, p) for p in plays if p.is_complete and p.sequence is not None),
            key=lambda pair: pair[0],
        )
        for sequence, play in completed:
            state = self._state
            if state is None or state.decided:
                break
            if sequence <= state.baseline_sequence:
                continue
            self._apply(state, classify(play), sequence)
        return self._state

    def force_outcome(self, category: PlayCategory | str) -> OnePlayState:
        """Debug override: resolve as if the next play were ``category``."""
        if not self._debug:
            raise OnePlayRejected("forced outcomes are only available in debug mode")
        state = self._state
        if state is None or state.decided:
            raise OnePlayRejected("no pending prediction to resolve")
        return self._apply(state, _as_category(category), state.baseline_sequence)

    def reset(self) -> None:
        if self._state is None:
            return
        record_date = self._state.date
        self._state = None
        persist_and_verify(self._store, one_play_key(self._user_id, record_date), None)
        logger.info("[one_play] Reset prediction for %s", record_date)
