"""REST API over the live-play engines for the selected game."""

import logging

from fastapi import APIRouter, HTTPException, Request

from app.models import (
    CommitRequest,
    ForceOutcomeRequest,
    HypeResponse,
    MomentResponse,
    MomentsResponse,
    OnePlayResponse,
    OptionResponse,
    WatchResponse,
)
from models import PlayCategory
from services import texts
from services.errors import OnePlayRejected
from services.game_watcher import GameWatcher

router = APIRouter(tags=["games"])
logger = logging.getLogger(__name__)


def _watcher(request: Request) -> GameWatcher:
    return request.app.state.watcher


def _category(raw: str) -> PlayCategory:
    try:
        return PlayCategory(raw.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"category must be one of {[c.value for c in PlayCategory]}",
        ) from None


def _watch_response(watcher: GameWatcher) -> WatchResponse:
    coordinator = watcher.coordinator
    return WatchResponse(
        game_id=watcher.game_id,
        polling=coordinator.is_running,
        interval_seconds=coordinator.interval,
    )


def _one_play_response(watcher: GameWatcher) -> OnePlayResponse:
    return OnePlayResponse(
        game_id=watcher.game_id,
        state=OnePlayResponse.state_model(watcher.one_play),
        options=[
            OptionResponse(category=c, label=texts.category_label(c, watcher.lang))
            for c in watcher.options()
        ],
        badge=watcher.badge,
    )


@router.post("/games/{game_id}/watch", response_model=WatchResponse)
async def watch_game(game_id: str, request: Request) -> WatchResponse:
    """Select the game to poll. Re-selecting the same game polls it immediately."""
    logger.info("[games] POST /api/games/%s/watch", game_id)
    watcher = _watcher(request)
    watcher.select(game_id)
    return _watch_response(watcher)


@router.delete("/games/watch", response_model=WatchResponse)
async def stop_watching(request: Request) -> WatchResponse:
    watcher = _watcher(request)
    watcher.stop()
    return _watch_response(watcher)


@router.get("/hype", response_model=HypeResponse)
async def get_hype(request: Request) -> HypeResponse:
    watcher = _watcher(request)
    return HypeResponse.from_state(watcher.game_id, watcher.hype_state)


@router.get("/moments", response_model=MomentsResponse)
async def get_moments(request: Request) -> MomentsResponse:
    watcher = _watcher(request)
    return MomentsResponse(
        game_id=watcher.game_id,
        moments=[MomentResponse.from_moment(m) for m in watcher.moments],
    )


@router.post("/moments/{moment_id}/reveal", response_model=MomentResponse)
async def reveal_moment(moment_id: str, request: Request) -> MomentResponse:
    moment = _watcher(request).reveal_moment(moment_id)
    if moment is None:
        raise HTTPException(status_code=404, detail="Moment not found")
    return MomentResponse.from_moment(moment)


@router.get("/one-play", response_model=OnePlayResponse)
async def get_one_play(request: Request) -> OnePlayResponse:
    return _one_play_response(_watcher(request))


@router.post("/one-play", response_model=OnePlayResponse, status_code=201)
async def commit_one_play(body: CommitRequest, request: Request) -> OnePlayResponse:
    watcher = _watcher(request)
    choice = _category(body.choice)
    try:
        watcher.commit_choice(choice)
    except OnePlayRejected as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _one_play_response(watcher)


@router.post("/one-play/force", response_model=OnePlayResponse)
async def force_one_play(body: ForceOutcomeRequest, request: Request) -> OnePlayResponse:
    """Debug-only: resolve the pending prediction as if ``category`` were the next play."""
    if not request.app.state.settings.debug:
        raise HTTPException(status_code=404, detail="Not found")
    watcher = _watcher(request)
    category = _category(body.category)
    try:
        watcher.force_outcome(category)
    except OnePlayRejected as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _one_play_response(watcher)


@router.delete("/one-play", response_model=OnePlayResponse)
async def reset_one_play(request: Request) -> OnePlayResponse:
    watcher = _watcher(request)
    watcher.reset_one_play()
    return _one_play_response(watcher)
