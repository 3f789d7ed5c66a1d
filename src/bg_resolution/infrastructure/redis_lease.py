"""Redis-backed lease so only one process runs a resolution cycle at a time.

acquire:  SET <key> <token> NX PX <ttl>
release:  compare-and-delete (Lua), so a lease that expired and was taken by
          another process is never deleted by the previous holder.

Redis being unreachable counts as "lease not acquired": the tick is skipped
and the next one retries. Redis holds nothing but this key.
"""

import logging
import uuid

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

_RELEASE_SCRIPT = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
end
return 0
"""


class RedisCycleLease:
    def __init__(self, redis: aioredis.Redis, key: str, ttl_seconds: float) -> None:
        self._redis = redis
        self._key = key
        self._ttl_ms = max(1, int(ttl_seconds * 1000))
        self._token: str | None = None

    @classmethod
    def from_url(cls, url: str, key: str, ttl_seconds: float) -> "RedisCycleLease":
        return cls(aioredis.from_url(url, decode_responses=True), key, ttl_seconds)

    async def ping(self) -> None:
        """Startup connectivity check; raises if Redis is unreachable."""
        await self._redis.ping()

    async def close(self) -> None:
        await self._redis.aclose()

    async def acquire(self) -> bool:
        token = uuid.uuid4().hex
        try:
            acquired = await self._redis.set(self._key, token, nx=True, px=self._ttl_ms)
        except RedisError as exc:
            logger.error("Lease %s: acquire failed: %s", self._key, exc)
            return False
        if not acquired:
            return False
        self._token = token
        return True

    async def release(self) -> None:
        if self._token is None:
            return
        token, self._token = self._token, None
        try:
            await self._redis.eval(_RELEASE_SCRIPT, 1, self._key, token)
        except RedisError as exc:
            # TTL expiry frees the lease eventually
            logger.warning("Lease %s: release failed: %s", self._key, exc)
