from __future__ import annotations

import logging
import os
from pathlib import Path
from urllib.parse import urlparse

from .constants import DEFAULT_SCOPES, LOGGER


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_csv_env(key: str) -> set[str]:
    raw = os.getenv(key, "")
    if not raw.strip():
        return set()
    return {item.strip() for item in raw.split(",") if item.strip()}


def get_env_int(key: str, default: int) -> int:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be an integer value.")


def get_env_float(key: str, default: float) -> float:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number.")


def get_scopes() -> list[str]:
    raw = os.getenv("SPOTIFY_SCOPES", "").strip()
    if not raw:
        return list(DEFAULT_SCOPES)
    return raw.split()


def load_env() -> None:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if not env_path.exists():
        return
    from dotenv import load_dotenv

    load_dotenv(env_path, override=False)


def validate_env() -> None:
    required = ("SPOTIFY_CLIENT_ID", "SPOTIFY_REDIRECT_URI")
    missing = [key for key in required if not os.getenv(key, "").strip()]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    redirect_uri = urlparse(os.getenv("SPOTIFY_REDIRECT_URI", "").strip())
    if redirect_uri.scheme not in {"http", "https"} or not redirect_uri.netloc:
        raise RuntimeError(
            "SPOTIFY_REDIRECT_URI must be an absolute http(s) URL (for example: "
            "http://127.0.0.1:3000/auth/callback)."
        )

    if get_env_int("MOODIFY_PENDING_AUTH_TTL_SECONDS", 600) <= 0:
        raise RuntimeError("MOODIFY_PENDING_AUTH_TTL_SECONDS must be positive.")
    if get_env_int("MOODIFY_REFRESH_MARGIN_SECONDS", 60) < 0:
        raise RuntimeError("MOODIFY_REFRESH_MARGIN_SECONDS must not be negative.")


def setup_logging() -> bool:
    debug_enabled = is_truthy(os.getenv("MOODIFY_DEBUG", "1"))
    if debug_enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return debug_enabled
