"""Per-physician locks around the check-overlap-then-write section."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from redis.exceptions import LockError, LockNotOwnedError

from locum.core.config import settings
from locum.core.redis_client import get_redis

logger = logging.getLogger(__name__)


class PhysicianLockRegistry:
    """Serializes application submissions per physician.

    Within one process an ``asyncio.Lock`` per physician is enough. When
    ``REDIS_URL`` is configured the section is additionally guarded by a
    Redis lock so several worker processes cannot interleave either.
    """

    PREFIX = "submission_lock:"

    def __init__(self, use_redis: bool | None = None):
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}
        self._use_redis = (
            settings.redis_url is not None if use_redis is None else use_redis
        )

    def is_locked(self, physician_id: str) -> bool:
        lock = self._locks.get(physician_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, physician_id: str) -> AsyncIterator[None]:
        """Hold the submission lock for a physician.

        The local lock is dropped once nobody holds or waits for it.
        """
        lock = self._locks.setdefault(physician_id, asyncio.Lock())
        self._holders[physician_id] = self._holders.get(physician_id, 0) + 1
        try:
            async with lock:
                if not self._use_redis:
                    yield
                    return
                async with self._distributed(physician_id):
                    yield
        finally:
            self._holders[physician_id] -= 1
            if not self._holders[physician_id]:
                del self._holders[physician_id]
                del self._locks[physician_id]

    @asynccontextmanager
    async def _distributed(self, physician_id: str) -> AsyncIterator[None]:
        redis = await get_redis()
        timeout = settings.submission_lock_timeout_seconds
        lock = redis.lock(
            f"{self.PREFIX}{physician_id}",
            timeout=timeout,
            blocking_timeout=timeout,
        )
        if not await lock.acquire():
            raise LockError(
                f"Unable to acquire submission lock for physician {physician_id}"
            )
        logger.debug(f"Acquired distributed lock for physician {physician_id}")
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockNotOwnedError:
                logger.warning(
                    f"Distributed lock for physician {physician_id} expired "
                    f"before release"
                )


physician_locks = PhysicianLockRegistry()
