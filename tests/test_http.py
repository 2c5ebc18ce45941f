import logging

import httpx
import pytest

from credentials.errors import NotAuthenticatedError
from moodify.http import build_spotify_client
from tests.oauth_helpers import build_accessor


def _echo_handler(seen: list[httpx.Request]):
    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/missing"):
            return httpx.Response(404, request=request, json={"error": {"status": 404}})
        return httpx.Response(200, request=request, json={"id": "user-1"})

    return handler


@pytest.mark.asyncio
async def test_bearer_token_injected(clock) -> None:
    accessor, _, _, refresh_fn = build_accessor(clock, expires_in=300)
    seen: list[httpx.Request] = []

    async with build_spotify_client(
        accessor, transport=httpx.MockTransport(_echo_handler(seen))
    ) as client:
        response = await client.get("/me")

    assert response.status_code == 200
    assert str(seen[0].url) == "https://api.spotify.com/v1/me"
    assert seen[0].headers["Authorization"] == "Bearer access-1"
    assert refresh_fn.calls == []


@pytest.mark.asyncio
async def test_expiring_token_refreshed_before_request(clock) -> None:
    accessor, _, _, refresh_fn = build_accessor(clock, expires_in=30)
    seen: list[httpx.Request] = []

    async with build_spotify_client(
        accessor, transport=httpx.MockTransport(_echo_handler(seen))
    ) as client:
        await client.get("/me")
        await client.get("/me/player")

    assert [request.headers["Authorization"] for request in seen] == [
        "Bearer access-refreshed",
        "Bearer access-refreshed",
    ]
    assert len(refresh_fn.calls) == 1


@pytest.mark.asyncio
async def test_unauthenticated_request_never_sent(clock) -> None:
    accessor, _, _, _ = build_accessor(clock, stored=False)
    seen: list[httpx.Request] = []

    async with build_spotify_client(
        accessor, transport=httpx.MockTransport(_echo_handler(seen))
    ) as client:
        with pytest.raises(NotAuthenticatedError):
            await client.get("/me")

    assert seen == []


@pytest.mark.asyncio
async def test_error_body_logged(clock, caplog) -> None:
    accessor, _, _, _ = build_accessor(clock, expires_in=300)
    caplog.set_level(logging.INFO, logger="moodify.auth")

    async with build_spotify_client(
        accessor, transport=httpx.MockTransport(_echo_handler([]))
    ) as client:
        response = await client.get("/missing")

    assert response.status_code == 404
    assert "Spotify API error body" in caplog.text
    assert "access-1" not in caplog.text
