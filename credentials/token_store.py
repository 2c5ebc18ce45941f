from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import asdict
from pathlib import Path

from credentials.models import TokenPair


class TokenStore(ABC):
    """Durable home of the one Spotify credential set this process uses."""

    @abstractmethod
    async def load(self) -> TokenPair | None:
        raise NotImplementedError

    @abstractmethod
    async def save(self, tokens: TokenPair) -> None:
        raise NotImplementedError

    @abstractmethod
    async def clear(self) -> None:
        raise NotImplementedError


class MemoryTokenStore(TokenStore):
    def __init__(self, tokens: TokenPair | None = None) -> None:
        self._tokens = tokens

    async def load(self) -> TokenPair | None:
        return self._tokens

    async def save(self, tokens: TokenPair) -> None:
        self._tokens = tokens

    async def clear(self) -> None:
        self._tokens = None


class FileTokenStore(TokenStore):
    def __init__(self, path: str | Path = ".tokens.json") -> None:
        self._path = Path(path)

    async def load(self) -> TokenPair | None:
        payload = self._read()
        if payload is None:
            return None
        return TokenPair(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            expires_at=payload["expires_at"],
        )

    async def save(self, tokens: TokenPair) -> None:
        self._write(asdict(tokens))

    async def clear(self) -> None:
        self._path.unlink(missing_ok=True)

    def _read(self) -> dict | None:
        if not self._path.exists():
            return None

        raw = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict) or "access_token" not in raw or "expires_at" not in raw:
            raise RuntimeError("Token store file is invalid; expected a stored token pair.")
        return raw

    def _write(self, payload: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        tmp_path = Path(tmp_name)

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
