from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any

# Payload types replayed to late subscribers; haptic pulses are fire-once.
_REPLAYED_TYPES = ("hype", "moments", "one_play")
# Announces a game switch; drops the replay state of the previous game.
SELECTED_TYPE = "selected"


class StateHub:
    """
    In-memory pubsub for pushing engine state to WebSocket subscribers.

    Channels are client sessions, so a subscriber stays attached across game
    switches. Payloads are dicts with a "type" key ("selected", "hype",
    "moments", "one_play", "haptic"). The latest payload of each replayed
    type is kept per channel and delivered to new subscribers first; a
    "selected" payload clears it. Slow subscribers lose their oldest queued
    payload.
    """

    def __init__(self, *, maxsize: int = 16) -> None:
        self._lock = asyncio.Lock()
        self._maxsize = maxsize
        self._subscribers: dict[str, set[asyncio.Queue[dict[str, Any]]]] = defaultdict(set)
        self._latest: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)

    @staticmethod
    def _offer(q: asyncio.Queue[dict[str, Any]], payload: dict[str, Any]) -> None:
        if q.full():
            try:
                _ = q.get_nowait()
            except asyncio.QueueEmpty:
                pass
        try:
            q.put_nowait(payload)
        except asyncio.QueueFull:
            # If we raced between full-check and put, drop silently.
            pass

    async def subscribe(self, channel: str) -> asyncio.Queue[dict[str, Any]]:
        q: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self._maxsize)
        async with self._lock:
            for kind in _REPLAYED_TYPES:
                payload = self._latest.get(channel, {}).get(kind)
                if payload is not None:
                    self._offer(q, payload)
            self._subscribers[channel].add(q)
        return q

    async def unsubscribe(self, channel: str, q: asyncio.Queue[dict[str, Any]]) -> None:
        async with self._lock:
            subs = self._subscribers.get(channel)
            if not subs:
                return
            subs.discard(q)
            if not subs:
                self._subscribers.pop(channel, None)

    async def publish(self, channel: str, payload: dict[str, Any]) -> None:
        async with self._lock:
            if payload.get("type") == SELECTED_TYPE:
                self._latest.pop(channel, None)
            elif payload.get("type") in _REPLAYED_TYPES:
                self._latest[channel][payload["type"]] = payload
            subs = list(self._subscribers.get(channel, set()))
        for q in subs:
            self._offer(q, payload)

    def publish_nowait(self, channel: str, payload: dict[str, Any]) -> None:
        """
        Fire-and-forget helper for sync contexts (engine callbacks).
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop: nothing to deliver to; best-effort only.
            return
        loop.create_task(self.publish(channel, payload))
