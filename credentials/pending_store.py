from __future__ import annotations

import threading
import time
from typing import Callable

from credentials.errors import PendingAuthExpiredError, PendingAuthNotFoundError
from credentials.models import PendingAuth
from credentials.pkce import generate_state

DEFAULT_PENDING_AUTH_TTL_SECONDS = 600


class PendingAuthStore:
    """Maps the opaque ``state`` of a login redirect to the PKCE verifier it was issued with.

    Every entry is consumable exactly once: ``consume`` pops the entry before it
    checks expiry, so a second call for the same state always fails with
    ``PendingAuthNotFoundError``. Expired entries are also swept whenever a new
    login is started.
    """

    def __init__(
        self,
        *,
        ttl_seconds: int = DEFAULT_PENDING_AUTH_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._pending: dict[str, PendingAuth] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def __contains__(self, state: object) -> bool:
        with self._lock:
            return state in self._pending

    def create(self, code_verifier: str, ttl_seconds: int | None = None) -> str:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        self.sweep()

        with self._lock:
            state = generate_state()
            while state in self._pending:
                state = generate_state()
            self._pending[state] = PendingAuth(
                state=state,
                code_verifier=code_verifier,
                expires_at=self._clock() + ttl,
            )
        return state

    def consume(self, state: str) -> str:
        with self._lock:
            pending = self._pending.pop(state, None)

        if pending is None:
            raise PendingAuthNotFoundError()
        if pending.is_expired(self._clock()):
            raise PendingAuthExpiredError()
        return pending.code_verifier

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired_states = [
                state for state, pending in self._pending.items() if pending.is_expired(now)
            ]
            for state in expired_states:
                del self._pending[state]
        return len(expired_states)
