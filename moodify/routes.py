from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from credentials.accessor import CredentialAccessor
from credentials.errors import CredentialError
from credentials.exchange import ExchangeHandler

from .constants import APP_VERSION, LOGGER

if TYPE_CHECKING:
    from fastmcp import FastMCP

LOGIN_SUCCESS_HTML = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Moodify</title></head>
<body style="font-family:sans-serif;text-align:center;padding:40px">
  <h2>Authentication successful!</h2>
  <p>Moodify is now connected to Spotify. You can close this tab.</p>
</body>
</html>"""


def error_response(error: CredentialError) -> Response:
    return JSONResponse(
        {"error": error.error_code, "error_description": str(error)},
        status_code=error.status_code,
    )


def mount_auth_routes(
    mcp: "FastMCP",
    exchange_handler: ExchangeHandler,
    accessor: CredentialAccessor,
) -> None:
    @mcp.custom_route("/auth/login", methods=["GET"])
    async def login_route(request: Request) -> Response:
        del request
        if not exchange_handler.client_id or not exchange_handler.redirect_uri:
            LOGGER.error("Spotify login requested but the client is not configured")
            return JSONResponse(
                {
                    "error": "server_error",
                    "error_description": "Spotify client is not configured.",
                },
                status_code=500,
            )
        return RedirectResponse(url=exchange_handler.begin_login(), status_code=302)

    @mcp.custom_route("/auth/callback", methods=["GET"])
    async def callback_route(request: Request) -> Response:
        try:
            await exchange_handler.complete_login(
                code=request.query_params.get("code"),
                state=request.query_params.get("state"),
                error=request.query_params.get("error"),
            )
        except CredentialError as error:
            LOGGER.warning("Spotify callback rejected (%s): %s", error.error_code, error)
            return error_response(error)
        return HTMLResponse(LOGIN_SUCCESS_HTML)

    @mcp.custom_route("/auth/logout", methods=["POST"])
    async def logout_route(request: Request) -> Response:
        del request
        await accessor.logout()
        LOGGER.info("Stored Spotify credentials cleared")
        return JSONResponse({"status": "logged_out"})


def mount_health_route(mcp: "FastMCP", accessor: CredentialAccessor) -> None:
    @mcp.custom_route("/health", methods=["GET"])
    async def health_route(request: Request) -> Response:
        del request
        return JSONResponse(
            {
                "status": "ok",
                "version": APP_VERSION,
                "authenticated": await accessor.is_authenticated(),
            }
        )


def mount_discovery_routes(mcp: "FastMCP") -> None:
    # MCP clients request OAuth discovery documents before connecting and expect a JSON body.
    async def not_supported(request: Request) -> Response:
        del request
        return JSONResponse({"error": "not_supported"}, status_code=404)

    for path in (
        "/.well-known/oauth-authorization-server",
        "/.well-known/oauth-protected-resource",
    ):
        mcp.custom_route(path, methods=["GET"])(not_supported)
