from app.config import Settings, load_settings
from app.main import create_app
from conftest import FakeSource

_VARS = (
    "MLB_API_BASE",
    "HTTP_TIMEOUT_SECONDS",
    "LIVE_POLL_SECONDS",
    "IDLE_POLL_SECONDS",
    "HYPE_LANG",
    "STATE_DIR",
    "ONE_PLAY_USER",
    "DEBUG",
    "REDUCED_MOTION",
    "PORT",
)


def test_defaults_without_environment(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    assert load_settings() == Settings()


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("LIVE_POLL_SECONDS", "15")
    monkeypatch.setenv("IDLE_POLL_SECONDS", "-5")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("HYPE_LANG", "JA")
    monkeypatch.setenv("STATE_DIR", "/tmp/oneplay")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("REDUCED_MOTION", "0")

    settings = load_settings()
    assert settings.live_poll_seconds == 15.0
    assert settings.idle_poll_seconds == 120.0
    assert settings.http_timeout == 10.0
    assert settings.lang == "ja"
    assert settings.state_dir == "/tmp/oneplay"
    assert settings.debug is True
    assert settings.reduced_motion is False


def test_unknown_language_falls_back(monkeypatch) -> None:
    monkeypatch.setenv("HYPE_LANG", "fr")
    assert load_settings().lang == "en"


def test_port_reaches_the_app_settings(monkeypatch) -> None:
    monkeypatch.setenv("PORT", "9100")
    app = create_app(source=FakeSource())
    assert app.state.settings.port == 9100

    monkeypatch.setenv("PORT", "not-a-port")
    assert load_settings().port == 8000
