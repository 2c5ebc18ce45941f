from __future__ import annotations

import logging

import httpx

from credentials.accessor import CredentialAccessor

from .constants import LOGGER, SPOTIFY_API_BASE_URL

ERROR_BODY_LIMIT = 1000


def bearer_injector(accessor: CredentialAccessor):
    async def inject_access_token(request: httpx.Request) -> None:
        token = await accessor.get_valid_token()
        request.headers["Authorization"] = f"Bearer {token}"

    return inject_access_token


def response_logger(logger: logging.Logger | None = None):
    log = logger or LOGGER

    async def log_response(response: httpx.Response) -> None:
        log.info(
            "Spotify API response %s %s -> %s",
            response.request.method,
            response.request.url,
            response.status_code,
        )
        if response.status_code >= 400:
            body = await response.aread()
            text = body.decode("utf-8", errors="replace")
            if len(text) > ERROR_BODY_LIMIT:
                text = text[:ERROR_BODY_LIMIT] + "...<truncated>"
            log.warning("Spotify API error body: %s", text)

    return log_response


def build_spotify_client(
    accessor: CredentialAccessor,
    *,
    base_url: str = SPOTIFY_API_BASE_URL,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
    debug_enabled: bool = True,
) -> httpx.AsyncClient:
    """Client for the Spotify Web API that always sends a currently valid access token.

    Every request goes through ``CredentialAccessor.get_valid_token``, so a token
    inside the refresh margin is renewed (once, however many requests race)
    before the request leaves the process.
    """
    response_hooks = [response_logger()] if debug_enabled else []
    return httpx.AsyncClient(
        base_url=base_url,
        headers={"Content-Type": "application/json"},
        timeout=timeout,
        transport=transport,
        event_hooks={
            "request": [bearer_injector(accessor)],
            "response": response_hooks,
        },
    )
