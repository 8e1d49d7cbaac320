"""
CSRF Token Cache

Single-owner cache for the request-forgery token attached to every
state-mutating RPC call. The token is fetched once, reused until it expires
or the remote side rejects it, then fetched again.
"""

import time
from typing import Awaitable, Callable, Optional

import anyio

from src.platform.logging.loguru_io import Logger


class CsrfTokenCache:
    def __init__(
        self,
        *,
        fetch_token: Callable[[], Awaitable[str]],
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch_token = fetch_token
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._token: Optional[str] = None
        self._expires_at = 0.0
        self._lock = anyio.Lock()

    def _is_valid(self) -> bool:
        return self._token is not None and self._clock() < self._expires_at

    async def get(self) -> str:
        if self._is_valid():
            return self._token  # type: ignore[return-value]
        async with self._lock:
            # Another caller may have refreshed while we waited
            if self._is_valid():
                return self._token  # type: ignore[return-value]
            return await self._fetch()

    async def refresh(self) -> str:
        async with self._lock:
            return await self._fetch()

    def invalidate(self) -> None:
        self._token = None
        self._expires_at = 0.0

    async def _fetch(self) -> str:
        token = await self._fetch_token()
        self._token = token
        self._expires_at = self._clock() + self._ttl_seconds
        Logger.base.debug('🔑 [CSRF] Token refreshed')
        return token
