from dataclasses import dataclass
from enum import Enum


class HypeLevel(str, Enum):
    CALM = "calm"
    WARM = "warm"
    HOT = "hot"
    INSANE = "insane"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)


_LEVEL_ORDER = (HypeLevel.CALM, HypeLevel.WARM, HypeLevel.HOT, HypeLevel.INSANE)

INSANE_THRESHOLD = 75.0
HOT_THRESHOLD = 50.0
WARM_THRESHOLD = 25.0


@dataclass(frozen=True)
class HypeState:
    value: float                # 0–100, 0 when there is no data
    level: HypeLevel
    is_live: bool
    tag: str                    # "LIVE" / "FINAL" / ""
    subtext: str                # inning + win-probability line
    narrative: str = ""         # fixed short text per level
    bump: bool = False          # level rose on this update (visual emphasis)
