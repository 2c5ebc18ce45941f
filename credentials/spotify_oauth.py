from __future__ import annotations

import httpx

from credentials.errors import ExchangeFailedError, RefreshFailedError, TokenRequestError
from credentials.models import TokenResponse

SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
DEFAULT_TOKEN_TIMEOUT_SECONDS = 10.0


async def _token_request(
    payload: dict[str, str],
    *,
    error_cls: type[TokenRequestError],
    client: httpx.AsyncClient | None = None,
    token_url: str = SPOTIFY_TOKEN_URL,
    timeout: float = DEFAULT_TOKEN_TIMEOUT_SECONDS,
) -> TokenResponse:
    own_client = client is None
    http_client = client or httpx.AsyncClient(timeout=timeout)

    try:
        response = await http_client.post(
            token_url,
            data=payload,
            headers={"Accept": "application/json"},
            timeout=timeout,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as error:
        raise error_cls(error.response.status_code, error.response.text) from error
    except httpx.HTTPError as error:
        raise error_cls(None, f"{type(error).__name__}: {error}") from error
    finally:
        if own_client:
            await http_client.aclose()

    try:
        return TokenResponse.from_payload(response.json())
    except ValueError as error:
        raise error_cls(response.status_code, f"{error} {response.text}") from error


async def exchange_code(
    client_id: str,
    code: str,
    redirect_uri: str,
    code_verifier: str,
    *,
    client: httpx.AsyncClient | None = None,
    token_url: str = SPOTIFY_TOKEN_URL,
    timeout: float = DEFAULT_TOKEN_TIMEOUT_SECONDS,
) -> TokenResponse:
    # Public PKCE client: the verifier replaces the client secret.
    return await _token_request(
        {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": client_id,
            "code_verifier": code_verifier,
        },
        error_cls=ExchangeFailedError,
        client=client,
        token_url=token_url,
        timeout=timeout,
    )


async def refresh_token(
    client_id: str,
    refresh_token: str,
    *,
    client: httpx.AsyncClient | None = None,
    token_url: str = SPOTIFY_TOKEN_URL,
    timeout: float = DEFAULT_TOKEN_TIMEOUT_SECONDS,
) -> TokenResponse:
    return await _token_request(
        {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": client_id,
        },
        error_cls=RefreshFailedError,
        client=client,
        token_url=token_url,
        timeout=timeout,
    )
