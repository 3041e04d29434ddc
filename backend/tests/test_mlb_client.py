from __future__ import annotations

import httpx
import pytest

from services.errors import MalformedDataError, TransientFetchError
from services.mlb_client import MlbStatsClient


def _client(handler) -> MlbStatsClient:
    return MlbStatsClient(base_url="https://stats.test/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetches_live_feed_and_win_probability() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        if request.url.path.endswith("/feed/live"):
            return httpx.Response(200, json={"gameData": {"status": {"statusCode": "I"}}})
        return httpx.Response(200, json=[{"dramaIndex": 12.0}])

    client = _client(handler)
    feed = await client.fetch_live_feed("745123")
    series = await client.fetch_win_probability("745123")
    await client.aclose()

    assert feed["gameData"]["status"]["statusCode"] == "I"
    assert series == [{"dramaIndex": 12.0}]
    assert seen == ["/api/v1.1/game/745123/feed/live", "/api/v1/game/745123/winProbability"]


@pytest.mark.asyncio
async def test_game_id_is_escaped_in_path() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path.decode())
        return httpx.Response(200, json=[])

    client = _client(handler)
    await client.fetch_win_probability("a/b")
    await client.aclose()
    assert seen == ["/api/v1/game/a%2Fb/winProbability"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, text="unavailable"),
        httpx.Response(404, json={"message": "no game"}),
        httpx.Response(200, text="<html>not json</html>"),
    ],
)
async def test_bad_responses_are_transient(response: httpx.Response) -> None:
    client = _client(lambda request: response)
    with pytest.raises(TransientFetchError):
        await client.fetch_live_feed("1")
    await client.aclose()


@pytest.mark.asyncio
async def test_transport_errors_are_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler)
    with pytest.raises(TransientFetchError):
        await client.fetch_win_probability("1")
    await client.aclose()


@pytest.mark.asyncio
async def test_wrong_document_shape_is_malformed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/feed/live"):
            return httpx.Response(200, json=["not", "an", "object"])
        return httpx.Response(200, json={"not": "a list"})

    client = _client(handler)
    with pytest.raises(MalformedDataError):
        await client.fetch_live_feed("1")
    with pytest.raises(MalformedDataError):
        await client.fetch_win_probability("1")
    await client.aclose()
