from __future__ import annotations

import base64
import hashlib
import secrets
import urllib.parse

SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"

VERIFIER_BYTES = 64
STATE_BYTES = 24


def generate_code_verifier() -> str:
    # 64 bytes -> 86 base64url characters, inside the RFC 7636 43..128 range
    return secrets.token_urlsafe(VERIFIER_BYTES)


def generate_code_challenge(verifier: str) -> str:
    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("utf-8").rstrip("=")


def generate_state() -> str:
    return secrets.token_urlsafe(STATE_BYTES)


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    scopes: list[str],
    state: str,
    code_challenge: str,
    *,
    authorize_url: str = SPOTIFY_AUTHORIZE_URL,
) -> str:
    query = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "code_challenge_method": "S256",
        "code_challenge": code_challenge,
        "state": state,
        "scope": " ".join(scopes),
    }
    return f"{authorize_url}?{urllib.parse.urlencode(query)}"
