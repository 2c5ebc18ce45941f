from __future__ import annotations

import logging
import time
from typing import Callable

from credentials import spotify_oauth
from credentials.errors import InvalidCallbackError, ProviderDeniedError
from credentials.models import TokenPair
from credentials.pending_store import PendingAuthStore
from credentials.pkce import build_authorization_url, generate_code_challenge, generate_code_verifier
from credentials.token_store import TokenStore
from moodify.constants import LOGGER


class ExchangeHandler:
    """Starts a PKCE login and finishes it when Spotify redirects back."""

    def __init__(
        self,
        pending_store: PendingAuthStore,
        token_store: TokenStore,
        *,
        client_id: str,
        redirect_uri: str,
        scopes: list[str],
        exchange_code_fn=spotify_oauth.exchange_code,
        clock: Callable[[], float] = time.time,
        logger: logging.Logger | None = None,
    ) -> None:
        self.pending_store = pending_store
        self.token_store = token_store
        self.client_id = client_id
        self.redirect_uri = redirect_uri
        self.scopes = list(scopes)
        self._exchange_code_fn = exchange_code_fn
        self._clock = clock
        self._logger = logger or LOGGER

    def begin_login(self) -> str:
        code_verifier = generate_code_verifier()
        state = self.pending_store.create(code_verifier)
        self._logger.info("Starting Spotify login; %s pending authorization(s)", len(self.pending_store))
        return build_authorization_url(
            client_id=self.client_id,
            redirect_uri=self.redirect_uri,
            scopes=self.scopes,
            state=state,
            code_challenge=generate_code_challenge(code_verifier),
        )

    async def complete_login(
        self,
        *,
        code: str | None,
        state: str | None,
        error: str | None = None,
    ) -> TokenPair:
        if error:
            raise ProviderDeniedError(error)
        if not code or not state:
            raise InvalidCallbackError()

        code_verifier = self.pending_store.consume(state)

        exchanged = await self._exchange_code_fn(
            client_id=self.client_id,
            code=code,
            redirect_uri=self.redirect_uri,
            code_verifier=code_verifier,
        )
        tokens = exchanged.to_token_pair(self._clock())
        await self.token_store.save(tokens)
        self._logger.info(
            "Spotify login completed; refresh token %s",
            "received" if tokens.refresh_token else "not issued",
        )
        return tokens
