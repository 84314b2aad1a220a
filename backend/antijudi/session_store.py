"""Redis session store and per-player spin locking."""
import uuid
from contextlib import asynccontextmanager

import redis.asyncio as redis

from antijudi.config import settings
from antijudi.errors import ErrorCode, GameError
from antijudi.logic.models import GameState


class SessionStore:
    """Redis client for simulator sessions and player locking."""

    # Key prefixes
    LOCK_PREFIX = "lock:player:"
    STATE_PREFIX = "state:player:"

    # TTLs in seconds
    LOCK_TTL = settings.lock_ttl_seconds
    STATE_TTL = settings.session_ttl_seconds

    # Lua script for token-safe lock release (compare-and-delete)
    # Only deletes if current value matches token; prevents releasing another's lock
    RELEASE_LOCK_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("del", KEYS[1])
    else
        return 0
    end
    """

    def __init__(self, redis_url: str | None = None):
        self._url = redis_url or settings.redis_url
        self._client: redis.Redis | None = None

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._client is None:
            self._client = redis.from_url(self._url, decode_responses=True)

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.close()
            self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client, raise if not connected."""
        if self._client is None:
            raise RuntimeError("Redis not connected")
        return self._client

    async def acquire_player_lock(self, player_id: str) -> str | None:
        """
        Attempt to acquire per-player lock with unique token.

        Returns token string if lock acquired, None if already locked.
        """
        key = f"{self.LOCK_PREFIX}{player_id}"
        token = str(uuid.uuid4())
        acquired = await self.client.set(key, token, nx=True, ex=self.LOCK_TTL)
        return token if acquired is True else None

    async def release_player_lock(self, player_id: str, token: str) -> bool:
        """
        Release per-player lock only if token matches.

        Returns True if lock was released, False if token didn't match.
        """
        key = f"{self.LOCK_PREFIX}{player_id}"
        result = await self.client.eval(self.RELEASE_LOCK_SCRIPT, 1, key, token)
        return result == 1

    @asynccontextmanager
    async def player_lock(self, player_id: str):
        """
        Context manager for player lock.

        Raises ROUND_IN_PROGRESS if lock cannot be acquired.
        Automatically releases lock on exit (token-safe).
        """
        token = await self.acquire_player_lock(player_id)
        if token is None:
            raise GameError(
                ErrorCode.ROUND_IN_PROGRESS,
                "Another spin is in progress for this player.",
            )
        try:
            yield
        finally:
            await self.release_player_lock(player_id, token)

    async def load_session(self, player_id: str) -> GameState:
        """Load the player's session, or a fresh one if none is stored."""
        key = f"{self.STATE_PREFIX}{player_id}"
        cached = await self.client.get(key)
        if cached is None:
            return GameState()
        return GameState.model_validate_json(cached)

    async def save_session(self, player_id: str, state: GameState) -> None:
        """Save the player's session with TTL."""
        key = f"{self.STATE_PREFIX}{player_id}"
        await self.client.setex(key, self.STATE_TTL, state.model_dump_json())

    async def clear_session(self, player_id: str) -> None:
        key = f"{self.STATE_PREFIX}{player_id}"
        await self.client.delete(key)


# Global instance
session_store = SessionStore()
