from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from credentials import spotify_oauth
from credentials.errors import NotAuthenticatedError, RefreshUnavailableError
from credentials.token_store import TokenStore
from moodify.constants import LOGGER

REFRESH_MARGIN_SECONDS = 60


class RefreshCoordinator:
    """Single-flight refresh of the stored Spotify credential.

    ``_inflight`` is the guard slot: ``None`` when idle, otherwise the task
    performing the one refresh_token grant every concurrent caller waits on.
    Claiming the slot happens without a suspension point between the check and
    the assignment, so two callers on the same event loop can never both claim
    it. The slot is released by a done-callback on the task, which runs on
    success, failure and cancellation before any waiter resumes.
    """

    def __init__(
        self,
        token_store: TokenStore,
        *,
        client_id: str,
        refresh_token_fn=spotify_oauth.refresh_token,
        refresh_margin_seconds: float = REFRESH_MARGIN_SECONDS,
        clock: Callable[[], float] = time.time,
        logger: logging.Logger | None = None,
    ) -> None:
        self.token_store = token_store
        self.client_id = client_id
        self._refresh_token_fn = refresh_token_fn
        self.refresh_margin_seconds = refresh_margin_seconds
        self._clock = clock
        self._logger = logger or LOGGER
        self._inflight: asyncio.Task | None = None

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def ensure_fresh(self) -> None:
        task = self._inflight
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(self._refresh())
            task.add_done_callback(self._release)
            self._inflight = task
        else:
            self._logger.info("Joining in-flight Spotify token refresh")

        # shield: a cancelled waiter must not cancel the refresh the others share
        await asyncio.shield(task)

    def _release(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None
        # waiters re-raise the failure themselves; mark it retrieved in case all were cancelled
        if not task.cancelled():
            task.exception()

    async def _refresh(self) -> None:
        tokens = await self.token_store.load()
        if tokens is None:
            raise NotAuthenticatedError()
        if not tokens.refresh_token:
            self._logger.warning("Spotify token refresh skipped: no refresh token stored")
            raise RefreshUnavailableError()
        if not tokens.expires_within(self.refresh_margin_seconds, self._clock()):
            # a caller holding an old snapshot arrived after another refresh saved this pair
            self._logger.info("Spotify access token already fresh; refresh skipped")
            return

        self._logger.info("Refreshing Spotify access token")
        try:
            refreshed = await self._refresh_token_fn(
                client_id=self.client_id,
                refresh_token=tokens.refresh_token,
            )
        except Exception as error:
            self._logger.warning("Spotify token refresh failed: %s", error)
            raise

        await self.token_store.save(
            refreshed.to_token_pair(
                self._clock(),
                fallback_refresh_token=tokens.refresh_token,
            )
        )
        self._logger.info("Spotify access token refreshed; expires in %ss", refreshed.expires_in)
