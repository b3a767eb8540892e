import uuid
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from .interface import DistributedLockInterface
from common.core.otel_axiom_exporter import get_logger

logger = get_logger(__name__)

# Atomic check-and-delete: only the holder of the token may release
RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


class RedisLock(DistributedLockInterface):
    """Redis-based lock shared by every API process."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: Optional[str] = None,
        db: int = 0,
        client: Optional[redis.Redis] = None,
    ):
        self.host = host
        self.port = port
        self.password = password
        self.db = db
        self._client: Optional[redis.Redis] = client
        self._lock_prefix = "lock:"
        self._connected = client is not None

    async def connect(self) -> bool:
        """Connect to Redis."""
        try:
            self._client = redis.Redis(
                host=self.host,
                port=self.port,
                password=self.password,
                db=self.db,
                decode_responses=True,
            )
            await self._client.ping()
            self._connected = True
            logger.info("Redis lock provider connected")
            return True
        except RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._connected = False
            return False

    async def close(self) -> None:
        """Disconnect from Redis."""
        if self._client:
            await self._client.aclose()
            self._connected = False
            logger.info("Redis lock provider disconnected")

    async def _ensure_connected(self) -> bool:
        if not self._connected:
            return await self.connect()
        return True

    async def acquire_lock(
        self, resource_key: str, timeout_seconds: int = 30
    ) -> Optional[str]:
        """
        Acquire the lock with SET NX EX.

        Returns:
            Lock token if acquired, None if held elsewhere or Redis is unreachable
        """
        if not await self._ensure_connected():
            return None

        lock_key = f"{self._lock_prefix}{resource_key}"
        lock_token = str(uuid.uuid4())

        try:
            acquired = await self._client.set(
                lock_key,
                lock_token,
                nx=True,  # Only set if not exists
                ex=timeout_seconds,
            )

            if acquired:
                logger.info(f"Acquired lock for {resource_key} with token {lock_token}")
                return lock_token
            else:
                logger.debug(
                    f"Failed to acquire lock for {resource_key} - already locked"
                )
                return None
        except RedisError as e:
            logger.error(f"Error acquiring lock for {resource_key}: {e}")
            return None

    async def release_lock(self, resource_key: str, lock_token: str) -> bool:
        if not await self._ensure_connected():
            return False

        lock_key = f"{self._lock_prefix}{resource_key}"

        try:
            result = await self._client.eval(RELEASE_SCRIPT, 1, lock_key, lock_token)

            if result:
                logger.info(f"Released lock for {resource_key}")
                return True
            else:
                logger.warning(
                    f"Cannot release lock for {resource_key} - token mismatch or lock expired"
                )
                return False
        except RedisError as e:
            logger.error(f"Error releasing lock for {resource_key}: {e}")
            return False

    async def is_locked(self, resource_key: str) -> bool:
        if not await self._ensure_connected():
            return False

        lock_key = f"{self._lock_prefix}{resource_key}"

        try:
            exists = await self._client.exists(lock_key)
            return bool(exists)
        except RedisError as e:
            logger.error(f"Error checking lock for {resource_key}: {e}")
            return False
