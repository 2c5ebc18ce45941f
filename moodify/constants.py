from __future__ import annotations

import logging

LOGGER = logging.getLogger("moodify.auth")
APP_VERSION = "0.1.0"

SPOTIFY_API_BASE_URL = "https://api.spotify.com/v1"

DEFAULT_SCOPES = [
    "user-read-playback-state",
    "user-modify-playback-state",
    "user-read-currently-playing",
    "user-library-read",
    "user-library-modify",
    "playlist-read-private",
    "playlist-modify-public",
    "playlist-modify-private",
    "user-top-read",
    "user-read-recently-played",
]
