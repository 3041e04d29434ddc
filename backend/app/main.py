import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, load_settings
from routes.games import router as games_router
from routes.state_ws import router as state_ws_router
from services.game_watcher import GameWatcher, LiveDataSource
from services.mlb_client import MlbStatsClient
from services.state_hub import StateHub
from services.storage import JsonFileRecordStore, MemoryRecordStore, RecordStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    source: LiveDataSource | None = None,
    store: RecordStore | None = None,
) -> FastAPI:
    """
    Build the API with its single client session.

    ``source`` and ``store`` default to the MLB Stats API and to a JSON file
    store under STATE_DIR (in-memory when unset).
    """
    settings = settings or load_settings()
    client: MlbStatsClient | None = None
    if source is None:
        client = MlbStatsClient(base_url=settings.mlb_api_base, timeout=settings.http_timeout)
        source = client
    if store is None:
        store = JsonFileRecordStore(settings.state_dir) if settings.state_dir else MemoryRecordStore()

    hub = StateHub()
    watcher = GameWatcher(
        source,
        store,
        hub=hub,
        lang=settings.lang,
        user_id=settings.user_id,
        live_interval=settings.live_poll_seconds,
        idle_interval=settings.idle_poll_seconds,
        reduced_motion=settings.reduced_motion,
        debug=settings.debug,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "[app] Started (lang=%s store=%s debug=%s)",
            settings.lang,
            type(store).__name__,
            settings.debug,
        )
        try:
            yield
        finally:
            await watcher.aclose()
            if client is not None:
                await client.aclose()

    app = FastAPI(title="OnePlay Live API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.hub = hub
    app.state.watcher = watcher

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(games_router, prefix="/api")
    app.include_router(state_ws_router, prefix="/api")
    return app


app = create_app()
