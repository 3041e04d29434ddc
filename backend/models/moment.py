from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .hype import HypeLevel
from .sample import as_int


@dataclass
class Moment:
    id: str                    # "{game_id}-{at_bat}-{timestamp_ms}"
    timestamp: float           # epoch seconds
    level: HypeLevel
    headline: str
    subtext: str
    reveal_detail: str
    revealed: bool = False
    at_bat_sequence: int | None = None

    def to_record(self) -> dict[str, Any]:
        record = asdict(self)
        record["level"] = self.level.value
        return record

    @classmethod
    def from_record(cls, record: Any) -> Moment | None:
        if not isinstance(record, dict):
            return None
        try:
            return cls(
                id=str(record["id"]),
                timestamp=float(record["timestamp"]),
                level=HypeLevel(record["level"]),
                headline=str(record.get("headline", "")),
                subtext=str(record.get("subtext", "")),
                reveal_detail=str(record.get("reveal_detail", "")),
                revealed=record.get("revealed") is True,
                at_bat_sequence=as_int(record.get("at_bat_sequence")),
            )
        except (KeyError, TypeError, ValueError):
            return None
