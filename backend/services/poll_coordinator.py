from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

LIVE_INTERVAL_SECONDS = 30.0
IDLE_INTERVAL_SECONDS = 120.0


@dataclass(frozen=True)
class PollToken:
    """Cancellation token for one fetch cycle; valid only while it is the newest."""

    generation: int
    subject_id: str


async def _maybe_await(value: Any) -> None:
    if inspect.isawaitable(value):
        await value


class PollCoordinator(Generic[T]):
    """
    Repeating fetch-and-handle loop with stale-result protection.

    Every cycle (the immediate one in start() and each timer fire) gets a new
    generation. A fetch result is handed to ``handle`` only if its token is
    still the newest when it resolves; anything older is dropped. Fetches are
    never cancelled, only their effects.

      - start(subject) on a new subject stops the old loop first
      - stop() cancels the timer and invalidates every in-flight cycle
      - ensure_interval() re-arms only when the interval actually changes
      - fetch errors go to ``on_error`` and the loop keeps running
    """

    def __init__(
        self,
        fetch: Callable[[str], Awaitable[T]],
        handle: Callable[[PollToken, T], Any],
        *,
        on_error: Callable[[PollToken, Exception], Any] | None = None,
        live_interval: float = LIVE_INTERVAL_SECONDS,
        idle_interval: float = IDLE_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._fetch = fetch
        self._handle = handle
        self._on_error = on_error
        self._live_interval = live_interval
        self._idle_interval = idle_interval
        self._sleep = sleep

        self._generation = 0
        self._subject: str | None = None
        self._interval = idle_interval
        self._timer: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()
        self.stale_discards = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def subject_id(self) -> str | None:
        return self._subject

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._subject is not None and self._timer is not None and not self._timer.done()

    def is_current(self, token: PollToken) -> bool:
        return token.generation == self._generation and token.subject_id == self._subject

    def start(self, subject_id: str) -> PollToken:
        """Poll ``subject_id`` now and keep polling it. Needs a running event loop."""
        if self._subject != subject_id:
            self.stop()
            self._subject = subject_id
            logger.info("[poll] Subject -> %s", subject_id)
        token = self._issue(subject_id)
        self.ensure_interval(self._interval)
        return token

    def stop(self) -> None:
        self._cancel_timer()
        if self._subject is not None:
            logger.info("[poll] Stopped polling %s", self._subject)
        self._subject = None
        self._generation += 1
        self._interval = self._idle_interval

    def set_live(self, is_live: bool) -> None:
        self.ensure_interval(self._live_interval if is_live else self._idle_interval)

    def ensure_interval(self, seconds: float) -> None:
        if self._subject is None or seconds <= 0:
            return
        if self._timer is not None and not self._timer.done() and self._interval == seconds:
            return
        self._cancel_timer()
        self._interval = seconds
        self._timer = asyncio.create_task(self._run_timer(seconds))
        logger.debug("[poll] Timer armed every %.0fs for %s", seconds, self._subject)

    async def wait_idle(self) -> None:
        """Wait until every issued fetch cycle has finished."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def aclose(self) -> None:
        timer = self._timer
        self.stop()
        if timer is not None:
            try:
                await timer
            except asyncio.CancelledError:
                pass
        await self.wait_idle()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _issue(self, subject_id: str) -> PollToken:
        self._generation += 1
        token = PollToken(generation=self._generation, subject_id=subject_id)
        task = asyncio.create_task(self._cycle(token))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return token

    async def _run_timer(self, seconds: float) -> None:
        while True:
            await self._sleep(seconds)
            if self._subject is None:
                return
            self._issue(self._subject)

    async def _cycle(self, token: PollToken) -> None:
        try:
            result = await self._fetch(token.subject_id)
        except Exception as exc:  # noqa: BLE001
            if not self.is_current(token):
                logger.debug("[poll] Dropping failure from stale generation %d", token.generation)
                return
            logger.warning("[poll] Fetch failed for %s (gen %d): %s", token.subject_id, token.generation, exc)
            if self._on_error is not None:
                await _maybe_await(self._on_error(token, exc))
            return

        if not self.is_current(token):
            self.stale_discards += 1
            logger.debug(
                "[poll] Discarding stale result for %s (gen %d, current %d)",
                token.subject_id,
                token.generation,
                self._generation,
            )
            return

        try:
            await _maybe_await(self._handle(token, result))
        except Exception:  # noqa: BLE001
            logger.exception("[poll] Result handler failed for %s (gen %d)", token.subject_id, token.generation)
