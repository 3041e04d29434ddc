from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from services.state_hub import SELECTED_TYPE

router = APIRouter(tags=["state"])
logger = logging.getLogger(__name__)


@router.websocket("/ws/state")
async def ws_state(websocket: WebSocket) -> None:
    """
    Stream engine updates for the client session, across game switches.

    Payload schema (one of):
      {"type": "selected", "game_id": str | null}
      {"type": "hype", "game_id": str, "value": float, "level": str, ...}
      {"type": "moments", "game_id": str, "moments": [...]}
      {"type": "one_play", "game_id": str, "state": {...} | null, "badge": str | null}
      {"type": "haptic", "game_id": str, "pattern": [int, ...]}

    The first payload is always "selected" with the current game (null when
    none is selected). A later "selected" means every earlier state is stale.
    """
    watcher = websocket.app.state.watcher
    hub = websocket.app.state.hub
    await websocket.accept()
    channel = watcher.channel
    q = await hub.subscribe(channel)
    logger.info("[state_ws] Subscribed channel=%r game_id=%r", channel, watcher.game_id)

    async def pump() -> None:
        while True:
            payload: dict[str, Any] = await q.get()
            await websocket.send_json(payload)

    sender: asyncio.Task[None] | None = None
    try:
        await websocket.send_json({"type": SELECTED_TYPE, "game_id": watcher.game_id})
        sender = asyncio.create_task(pump())
        # Client messages are ignored; receiving only surfaces the disconnect.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return
    finally:
        if sender is not None:
            sender.cancel()
        await hub.unsubscribe(channel, q)
