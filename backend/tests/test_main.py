from fastapi.testclient import TestClient

from app.config import Settings
from app.main import app, create_app
from conftest import FakeSource, make_feed
from services.storage import MemoryRecordStore

client = TestClient(app)


def _receive_until(ws, predicate, limit: int = 20) -> dict:
    for _ in range(limit):
        payload = ws.receive_json()
        if predicate(payload):
            return payload
    raise AssertionError("expected payload never arrived")


def test_health() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_state_socket_announces_empty_selection() -> None:
    with TestClient(create_app(Settings(), source=FakeSource(), store=MemoryRecordStore())) as local:
        with local.websocket_connect("/api/ws/state") as ws:
            assert ws.receive_json() == {"type": "selected", "game_id": None}


def test_state_socket_follows_game_switch_and_stop() -> None:
    source = FakeSource()
    source.feed = make_feed(state="live")
    with TestClient(create_app(Settings(), source=source, store=MemoryRecordStore())) as local:
        assert local.post("/api/games/111/watch").status_code == 200
        with local.websocket_connect("/api/ws/state") as ws:
            assert ws.receive_json() == {"type": "selected", "game_id": "111"}

            assert local.post("/api/games/222/watch").status_code == 200
            _receive_until(ws, lambda p: p == {"type": "selected", "game_id": "222"})
            hype = _receive_until(ws, lambda p: p["type"] == "hype")
            assert hype["game_id"] == "222"
            assert hype["tag"] == "LIVE"

            assert local.delete("/api/games/watch").status_code == 200
            _receive_until(ws, lambda p: p == {"type": "selected", "game_id": None})
