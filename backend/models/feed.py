"""Parsed views of the MLB live feed. Raw documents stop here."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .sample import as_dict, as_int

FINAL_STATUS_CODES = frozenset({"F", "FD", "FF", "FT", "FO"})


def _lower_str(value: Any) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


@dataclass(frozen=True)
class Play:
    sequence: int | None = None            # about.atBatIndex
    event_type: str = ""                   # result.eventType, e.g. "home_run"
    event: str = ""                        # result.event, e.g. "Home Run"
    sub_event_types: tuple[str, ...] = ()  # playEvents[].details.eventType
    is_scoring: bool = False
    is_out: bool = False
    is_complete: bool = False
    description: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> Play:
        if not isinstance(raw, dict):
            return cls()
        result = as_dict(raw.get("result"))
        about = as_dict(raw.get("about"))

        sub_events: list[str] = []
        play_events = raw.get("playEvents")
        if isinstance(play_events, list):
            for ev in play_events:
                sub_type = _lower_str(as_dict(as_dict(ev).get("details")).get("eventType"))
                if sub_type:
                    sub_events.append(sub_type)

        description = result.get("description")
        return cls(
            sequence=as_int(about.get("atBatIndex")),
            event_type=_lower_str(result.get("eventType")),
            event=_lower_str(result.get("event")),
            sub_event_types=tuple(sub_events),
            is_scoring=about.get("isScoringPlay") is True,
            is_out=result.get("isOut") is True or about.get("hasOut") is True,
            is_complete=about.get("isComplete") is True,
            description=description if isinstance(description, str) else "",
        )


@dataclass(frozen=True)
class LiveFeed:
    status_code: str = ""
    abstract_state: str = ""
    detailed_state: str = ""
    current_inning: int | None = None
    inning_state: str = ""
    plays: tuple[Play, ...] = field(default_factory=tuple)

    @property
    def is_live(self) -> bool:
        return (
            self.abstract_state == "Live"
            or self.status_code == "I"
            or "in progress" in self.detailed_state.lower()
        )

    @property
    def is_final(self) -> bool:
        return self.status_code in FINAL_STATUS_CODES

    @property
    def last_completed_sequence(self) -> int:
        """Highest at-bat sequence among completed plays, -1 before the first one."""
        done = [p.sequence for p in self.plays if p.is_complete and p.sequence is not None]
        return max(done, default=-1)

    @classmethod
    def from_raw(cls, raw: Any) -> LiveFeed:
        doc = as_dict(raw)
        status = as_dict(as_dict(doc.get("gameData")).get("status"))
        live_data = as_dict(doc.get("liveData"))
        linescore = as_dict(live_data.get("linescore"))

        plays: list[Play] = []
        all_plays = as_dict(live_data.get("plays")).get("allPlays")
        if isinstance(all_plays, list):
            plays = [Play.from_raw(p) for p in all_plays]

        def _str(value: Any) -> str:
            return value if isinstance(value, str) else ""

        return cls(
            status_code=_str(status.get("statusCode")),
            abstract_state=_str(status.get("abstractGameState")),
            detailed_state=_str(status.get("detailedState")),
            current_inning=as_int(linescore.get("currentInning")),
            inning_state=_str(linescore.get("inningState")),
            plays=tuple(plays),
        )
