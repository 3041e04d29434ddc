from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any


class PlayCategory(str, Enum):
    HR = "hr"
    SB = "sb"
    K = "k"
    BB = "bb"
    HIT = "hit"
    DP = "dp"
    ERROR = "error"
    SAC = "sac"
    RUN = "run"
    OUT = "out"
    UNKNOWN = "unknown"


class Outcome(str, Enum):
    HIT = "hit"
    MISS = "miss"


OPTION_COUNT = 4


@dataclass(frozen=True)
class OnePlayState:
    """
    One prediction per calendar day per user.

    Committed while ``decided`` is False; Decided once an offered category is
    observed. Records are replaced whole on every transition.
    """

    date: str
    game_id: str
    options: tuple[PlayCategory, ...]
    choice: PlayCategory
    baseline_sequence: int
    decided: bool = False
    actual_category: PlayCategory | None = None
    outcome: Outcome | None = None
    skipped_count: int = 0
    last_no_contest_category: PlayCategory | None = None

    def __post_init__(self) -> None:
        if len(self.options) != OPTION_COUNT or len(set(self.options)) != OPTION_COUNT:
            raise ValueError(f"options must be {OPTION_COUNT} distinct categories: {self.options!r}")
        if self.choice not in self.options:
            raise ValueError(f"choice {self.choice!r} is not among the options")

    def advance_past(self, sequence: int, category: PlayCategory) -> OnePlayState:
        """No-contest: keep waiting for the play after ``sequence``."""
        return replace(
            self,
            baseline_sequence=max(self.baseline_sequence, sequence),
            skipped_count=self.skipped_count + 1,
            last_no_contest_category=category,
        )

    def resolve(self, category: PlayCategory) -> OnePlayState:
        outcome = Outcome.HIT if category == self.choice else Outcome.MISS
        return replace(self, decided=True, actual_category=category, outcome=outcome)

    def to_record(self) -> dict[str, Any]:
        record = asdict(self)
        record["options"] = [c.value for c in self.options]
        record["choice"] = self.choice.value
        for key in ("actual_category", "outcome", "last_no_contest_category"):
            value = getattr(self, key)
            record[key] = value.value if value is not None else None
        return record

    @classmethod
    def from_record(cls, record: Any) -> OnePlayState | None:
        if not isinstance(record, dict):
            return None

        def _opt(enum_cls: type[Enum], value: Any) -> Any:
            return enum_cls(value) if value is not None else None

        try:
            return cls(
                date=str(record["date"]),
                game_id=str(record["game_id"]),
                options=tuple(PlayCategory(c) for c in record["options"]),
                choice=PlayCategory(record["choice"]),
                baseline_sequence=int(record["baseline_sequence"]),
                decided=record.get("decided") is True,
                actual_category=_opt(PlayCategory, record.get("actual_category")),
                outcome=_opt(Outcome, record.get("outcome")),
                skipped_count=int(record.get("skipped_count", 0)),
                last_no_contest_category=_opt(PlayCategory, record.get("last_no_contest_category")),
            )
        except (KeyError, TypeError, ValueError):
            return None
