from __future__ import annotations

import functools
import os
from typing import TYPE_CHECKING

from credentials import spotify_oauth
from credentials.accessor import CredentialAccessor
from credentials.exchange import ExchangeHandler
from credentials.pending_store import DEFAULT_PENDING_AUTH_TTL_SECONDS, PendingAuthStore
from credentials.refresh import REFRESH_MARGIN_SECONDS, RefreshCoordinator
from credentials.token_store import FileTokenStore
from moodify.constants import APP_VERSION, LOGGER
from moodify.env import (
    get_env_float,
    get_env_int,
    get_scopes,
    load_env,
    parse_csv_env,
    setup_logging,
    validate_env,
)
from moodify.guards import DEFAULT_ALLOWED_ORIGINS, McpGuardMiddleware
from moodify.routes import mount_auth_routes, mount_discovery_routes, mount_health_route

if TYPE_CHECKING:
    from fastmcp import FastMCP
    from starlette.applications import Starlette


def create_mcp() -> "FastMCP":
    from fastmcp import FastMCP

    load_env()
    setup_logging()
    validate_env()

    client_id = os.getenv("SPOTIFY_CLIENT_ID", "").strip()
    redirect_uri = os.getenv("SPOTIFY_REDIRECT_URI", "").strip()
    token_timeout = get_env_float(
        "SPOTIFY_TOKEN_TIMEOUT", spotify_oauth.DEFAULT_TOKEN_TIMEOUT_SECONDS
    )

    token_store = FileTokenStore(os.getenv("SPOTIFY_TOKEN_STORE_PATH", ".tokens.json"))
    pending_store = PendingAuthStore(
        ttl_seconds=get_env_int(
            "MOODIFY_PENDING_AUTH_TTL_SECONDS", DEFAULT_PENDING_AUTH_TTL_SECONDS
        ),
    )
    exchange_handler = ExchangeHandler(
        pending_store,
        token_store,
        client_id=client_id,
        redirect_uri=redirect_uri,
        scopes=get_scopes(),
        exchange_code_fn=functools.partial(spotify_oauth.exchange_code, timeout=token_timeout),
    )
    coordinator = RefreshCoordinator(
        token_store,
        client_id=client_id,
        refresh_token_fn=functools.partial(spotify_oauth.refresh_token, timeout=token_timeout),
        refresh_margin_seconds=get_env_int("MOODIFY_REFRESH_MARGIN_SECONDS", REFRESH_MARGIN_SECONDS),
    )
    accessor = CredentialAccessor(token_store, coordinator)

    mcp = FastMCP(name="Moodify")
    mount_discovery_routes(mcp)
    mount_auth_routes(mcp, exchange_handler, accessor)
    mount_health_route(mcp, accessor)
    setattr(mcp, "_accessor", accessor)
    LOGGER.info("Moodify %s ready; Spotify redirect URI %s", APP_VERSION, redirect_uri)
    return mcp


def create_app(mcp: "FastMCP | None" = None) -> "Starlette":
    from starlette.middleware import Middleware

    mcp = mcp or create_mcp()
    allowed_origins = DEFAULT_ALLOWED_ORIGINS | parse_csv_env("ALLOWED_ORIGIN")
    api_key = os.getenv("MCP_API_KEY", "").strip() or None
    if api_key is None:
        LOGGER.warning("MCP_API_KEY is not set; /mcp accepts unauthenticated requests")
    return mcp.http_app(
        path="/mcp",
        transport="streamable-http",
        middleware=[
            Middleware(
                McpGuardMiddleware,
                allowed_origins=allowed_origins,
                api_key=api_key,
                path_prefix="/mcp",
            )
        ],
    )


def main() -> None:
    import uvicorn

    host = os.getenv("MCP_HOST", "127.0.0.1")
    port = get_env_int("MCP_PORT", 3000)
    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()
