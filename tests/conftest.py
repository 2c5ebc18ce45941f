import pytest

from tests.oauth_helpers import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_700_000_000.0)


@pytest.fixture
def spotify_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "moodify-client")
    monkeypatch.setenv("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:3000/auth/callback")
    monkeypatch.setenv("SPOTIFY_TOKEN_STORE_PATH", str(tmp_path / "tokens.json"))
    monkeypatch.delenv("SPOTIFY_SCOPES", raising=False)
    monkeypatch.delenv("MOODIFY_PENDING_AUTH_TTL_SECONDS", raising=False)
    monkeypatch.delenv("MOODIFY_REFRESH_MARGIN_SECONDS", raising=False)
    monkeypatch.delenv("ALLOWED_ORIGIN", raising=False)
    monkeypatch.delenv("MCP_API_KEY", raising=False)
    return tmp_path / "tokens.json"
