"""Access token cache for the PayHere merchant API."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from cachetools import TLRUCache

from payhere.logging import get_logger
from payhere.models.payment import TokenResponse

logger = get_logger(__name__)

_TOKEN_KEY = "access_token"


@dataclass(frozen=True)
class AccessToken:
    """Bearer token with an absolute expiry on the cache clock."""

    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


def _token_ttu(_key: str, token: AccessToken, _now: float) -> float:
    return token.expires_at


class TokenCache:
    """Holds at most one access token and refreshes it lazily.

    Expiry is evaluated on each access (a token is stale once
    ``now >= expires_at``); there is no background timer. Acquisition is
    single-flight: concurrent callers that find the cache empty wait on
    one lock and share the token fetched by the first of them.

    Attributes:
        timer: Clock used for expiry, ``time.monotonic`` by default.
    """

    def __init__(self, timer: Callable[[], float] = time.monotonic) -> None:
        self._cache: TLRUCache[str, AccessToken] = TLRUCache(
            maxsize=1, ttu=_token_ttu, timer=timer
        )
        self._lock = asyncio.Lock()

    def timer(self) -> float:
        return self._cache.timer()

    def get(self) -> Optional[AccessToken]:
        """Return the cached token, or None when absent or expired."""
        return self._cache.get(_TOKEN_KEY)

    def store(self, value: str, expires_in: float) -> AccessToken:
        """Replace the cached token with a new one valid for expires_in seconds."""
        token = AccessToken(value=value, expires_at=self.timer() + expires_in)
        self._cache[_TOKEN_KEY] = token
        return token

    def invalidate(self) -> None:
        self._cache.pop(_TOKEN_KEY, None)

    async def get_or_acquire(
        self,
        acquire: Callable[[], Awaitable[TokenResponse]],
    ) -> str:
        """Return a valid token value, calling ``acquire`` if needed.

        Exceptions raised by ``acquire`` propagate and leave the cache empty.
        """
        token = self.get()
        if token is not None:
            return token.value

        async with self._lock:
            # Another caller may have refreshed while we waited
            token = self.get()
            if token is not None:
                return token.value

            response = await acquire()
            token = self.store(response.access_token, response.expires_in)
            logger.info("token_cached", expires_in=response.expires_in)
            return token.value
