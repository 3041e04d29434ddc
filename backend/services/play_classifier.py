"""Map a play to the single category a user could have predicted."""

from __future__ import annotations

from typing import Any

from models import Play, PlayCategory

_WALK_EVENTS = frozenset({"walk", "intent_walk", "hit_by_pitch"})
_HIT_EVENTS = frozenset({"single", "double", "triple"})
_ERROR_EVENTS = frozenset({"field_error", "error"})
_SAC_EVENTS = frozenset({"sac_fly", "sac_bunt"})


def _is_stolen_base(event_type: str) -> bool:
    return event_type.startswith("stolen_base")


def classify(play: Play | dict[str, Any] | None) -> PlayCategory:
    """
    First match wins, most specific first:

      home run > stolen base (play or any sub-event) > strikeout > walk/HBP >
      single/double/triple > double play > error > sacrifice > scoring > out

    A scoring single is a ``hit``, a strikeout double play is a ``k``.
    Anything unrecognised is ``unknown``.
    """
    if not isinstance(play, Play):
        play = Play.from_raw(play)

    event_type = play.event_type
    if event_type == "home_run":
        return PlayCategory.HR
    if _is_stolen_base(event_type) or any(_is_stolen_base(t) for t in play.sub_event_types):
        return PlayCategory.SB
    if event_type.startswith("strikeout"):
        return PlayCategory.K
    if event_type in _WALK_EVENTS:
        return PlayCategory.BB
    if event_type in _HIT_EVENTS:
        return PlayCategory.HIT
    if "double_play" in event_type or event_type == "triple_play":
        return PlayCategory.DP
    if event_type in _ERROR_EVENTS:
        return PlayCategory.ERROR
    if event_type in _SAC_EVENTS:
        return PlayCategory.SAC
    if play.is_scoring:
        return PlayCategory.RUN
    if play.is_out:
        return PlayCategory.OUT
    return PlayCategory.UNKNOWN
