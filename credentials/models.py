from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PendingAuth:
    state: str
    code_verifier: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str | None
    expires_at: float

    def expires_within(self, margin_seconds: float, now: float) -> bool:
        return self.expires_at <= now + margin_seconds


@dataclass
class TokenResponse:
    access_token: str
    refresh_token: str | None
    expires_in: int
    scope: str = ""

    @classmethod
    def from_payload(cls, payload: dict) -> "TokenResponse":
        if not isinstance(payload, dict):
            raise ValueError("Token response must be a JSON object.")
        access_token = payload.get("access_token")
        refresh_token = payload.get("refresh_token")
        expires_in = payload.get("expires_in")
        scope = payload.get("scope", "")

        if not isinstance(access_token, str) or not access_token:
            raise ValueError("Token response missing access_token.")
        if refresh_token is not None and not isinstance(refresh_token, str):
            raise ValueError("Token response refresh_token must be a string.")
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise ValueError("Token response missing expires_in.")
        if not isinstance(scope, str):
            raise ValueError("Token response scope must be a string.")

        return cls(
            access_token=access_token,
            refresh_token=refresh_token or None,
            expires_in=expires_in,
            scope=scope,
        )

    def to_token_pair(self, now: float, *, fallback_refresh_token: str | None = None) -> TokenPair:
        return TokenPair(
            access_token=self.access_token,
            refresh_token=self.refresh_token or fallback_refresh_token,
            expires_at=now + self.expires_in,
        )
