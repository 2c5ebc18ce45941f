from __future__ import annotations

import hmac
import re

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .constants import LOGGER

DEFAULT_ALLOWED_ORIGINS = {
    "http://localhost",
    "https://claude.ai",
}
LOCAL_ORIGIN_PREFIXES = ("http://localhost", "http://127.0.0.1")

_PORT_SUFFIX = re.compile(r":\d+$")


def is_allowed_origin(origin: str | None, allowed_origins: set[str]) -> bool:
    """Requests without an Origin header (non-browser clients) are allowed."""
    if not origin:
        return True
    if origin in allowed_origins or _PORT_SUFFIX.sub("", origin) in allowed_origins:
        return True
    return origin.startswith(LOCAL_ORIGIN_PREFIXES)


def guard_error_response(code: str, description: str, status_code: int) -> Response:
    return JSONResponse(
        {"error": code, "error_description": description},
        status_code=status_code,
    )


class McpGuardMiddleware(BaseHTTPMiddleware):
    """Origin allow-list and optional shared API key for the MCP endpoint.

    Only paths under ``path_prefix`` are checked; the auth routes and /health
    stay reachable from a browser without the key.
    """

    def __init__(
        self,
        app,
        *,
        allowed_origins: set[str] | None = None,
        api_key: str | None = None,
        path_prefix: str = "/mcp",
    ) -> None:
        super().__init__(app)
        self.allowed_origins = set(DEFAULT_ALLOWED_ORIGINS if allowed_origins is None else allowed_origins)
        self.api_key = api_key or None
        self.path_prefix = path_prefix.rstrip("/")

    def _is_guarded(self, path: str) -> bool:
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    async def dispatch(self, request: Request, call_next):
        if not self._is_guarded(request.url.path):
            return await call_next(request)

        origin = request.headers.get("origin")
        if not is_allowed_origin(origin, self.allowed_origins):
            LOGGER.warning("Rejected MCP request from origin %s", origin)
            return guard_error_response("forbidden_origin", "Origin not allowed.", 403)

        if self.api_key is not None:
            supplied = request.headers.get("authorization", "")
            expected = f"Bearer {self.api_key}"
            if not hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
                return guard_error_response("unauthorized", "Missing or invalid API key.", 401)

        return await call_next(request)
