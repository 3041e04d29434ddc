"""Deterministic pseudo-random streams seeded by strings."""

from __future__ import annotations

from typing import Callable

_MASK32 = 0xFFFFFFFF
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619
_TWO_POW_32 = 4294967296.0


def _utf16_units(seed: str) -> list[int]:
    # Same code units a browser's charCodeAt() sees, so seeds agree across clients.
    raw = seed.encode("utf-16-le")
    return [raw[i] | (raw[i + 1] << 8) for i in range(0, len(raw), 2)]


def seed_hash(seed: str) -> int:
    h = _FNV_OFFSET
    for unit in _utf16_units(seed):
        h ^= unit
        h = (h * _FNV_PRIME) & _MASK32
    return h


def create_stream(seed: str) -> Callable[[], float]:
    """
    Return a xorshift32 stream of floats in [0, 1) derived from ``seed``.

    Two streams created from the same seed yield identical sequences.
    """
    x = seed_hash(seed)

    def draw() -> float:
        nonlocal x
        x ^= (x << 13) & _MASK32
        x ^= x >> 17
        x ^= (x << 5) & _MASK32
        return x / _TWO_POW_32

    return draw
