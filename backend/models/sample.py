from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


def as_float(value: Any) -> float | None:
    """Coerce an upstream numeric field; anything non-finite counts as absent."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def as_int(value: Any) -> int | None:
    number = as_float(value)
    if number is None or number != int(number):
        return None
    return int(number)


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class WinProbabilitySample:
    home_win_prob: float | None = None     # 0–100
    away_win_prob: float | None = None     # 0–100
    drama_index: float | None = None       # 0–320
    leverage_index: float | None = None    # 0–6
    inning: int | None = None
    half: str | None = None                # "top" | "bottom"
    at_bat_sequence: int | None = None
    description: str | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> WinProbabilitySample | None:
        """Parse one raw win-probability entry; None if it has no usable numbers."""
        if not isinstance(raw, dict):
            return None
        home = as_float(raw.get("homeTeamWinProbability"))
        away = as_float(raw.get("awayTeamWinProbability"))
        drama = as_float(raw.get("dramaIndex"))
        leverage = as_float(raw.get("leverageIndex"))
        if home is None and away is None and drama is None and leverage is None:
            return None

        about = as_dict(raw.get("about"))
        result = as_dict(raw.get("result"))
        half = about.get("halfInning")
        description = result.get("description")
        return cls(
            home_win_prob=home,
            away_win_prob=away,
            drama_index=drama,
            leverage_index=leverage,
            inning=as_int(about.get("inning")),
            half=half.lower() if isinstance(half, str) and half else None,
            at_bat_sequence=as_int(about.get("atBatIndex", raw.get("atBatIndex"))),
            description=description if isinstance(description, str) and description else None,
        )


def extract_last_sample(raw_samples: Any) -> WinProbabilitySample | None:
    """
    Return the newest usable sample from a time-ordered raw series.

    Scans from the end backward and stops at the first entry carrying at least
    one of home/away win probability, drama index or leverage index.
    """
    if not isinstance(raw_samples, list):
        return None
    for raw in reversed(raw_samples):
        sample = WinProbabilitySample.from_raw(raw)
        if sample is not None:
            return sample
    return None
