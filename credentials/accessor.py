from __future__ import annotations

import time
from typing import Callable

from credentials.errors import NotAuthenticatedError
from credentials.refresh import RefreshCoordinator
from credentials.token_store import TokenStore

class CredentialAccessor:
    def __init__(
        self,
        token_store: TokenStore,
        coordinator: RefreshCoordinator,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.token_store = token_store
        self.coordinator = coordinator
        self._clock = clock

    @property
    def refresh_margin_seconds(self) -> float:
        return self.coordinator.refresh_margin_seconds

    async def get_valid_token(self) -> str:
        """Return an access token valid for at least the refresh margin.

        The store is read again after any refresh: a concurrent caller may have
        replaced the pair, so the pre-refresh snapshot is never returned.
        """
        tokens = await self.token_store.load()
        if tokens is None:
            raise NotAuthenticatedError()

        if tokens.expires_within(self.refresh_margin_seconds, self._clock()):
            await self.coordinator.ensure_fresh()

        current = await self.token_store.load()
        if current is None:
            raise NotAuthenticatedError()
        return current.access_token

    async def is_authenticated(self) -> bool:
        return await self.token_store.load() is not None

    async def logout(self) -> None:
        await self.token_store.clear()
