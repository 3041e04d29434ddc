"""Runtime settings from the environment (backend/.env is loaded by server.py)."""

import os
from dataclasses import dataclass

from services.mlb_client import DEFAULT_API_BASE, DEFAULT_TIMEOUT_SECONDS
from services.poll_coordinator import IDLE_INTERVAL_SECONDS, LIVE_INTERVAL_SECONDS
from services.texts import normalize_lang

_TRUTHY = {"1", "true", "yes", "on"}


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    try:
        value = float(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


def _env_bool(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    mlb_api_base: str = DEFAULT_API_BASE
    http_timeout: float = DEFAULT_TIMEOUT_SECONDS
    live_poll_seconds: float = LIVE_INTERVAL_SECONDS
    idle_poll_seconds: float = IDLE_INTERVAL_SECONDS
    lang: str = "en"
    state_dir: str | None = None      # None -> in-memory records
    user_id: str = "local"
    debug: bool = False               # enables forced one-play outcomes
    reduced_motion: bool = False      # disables haptic pulses
    port: int = 8000


def load_settings() -> Settings:
    return Settings(
        mlb_api_base=_env_str("MLB_API_BASE", DEFAULT_API_BASE),
        http_timeout=_env_float("HTTP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        live_poll_seconds=_env_float("LIVE_POLL_SECONDS", LIVE_INTERVAL_SECONDS),
        idle_poll_seconds=_env_float("IDLE_POLL_SECONDS", IDLE_INTERVAL_SECONDS),
        lang=normalize_lang(os.environ.get("HYPE_LANG")),
        state_dir=os.environ.get("STATE_DIR", "").strip() or None,
        user_id=_env_str("ONE_PLAY_USER", "local"),
        debug=_env_bool("DEBUG"),
        reduced_motion=_env_bool("REDUCED_MOTION"),
        port=int(_env_float("PORT", 8000)),
    )
