import time
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from common.core.otel_axiom_exporter import get_logger
from .interface import DistributedLockInterface

logger = get_logger(__name__)


@dataclass
class LockEntry:
    """A held lock and the monotonic time it lapses at."""

    token: str
    expires_at: float

    def is_expired(self) -> bool:
        return time.monotonic() >= self.expires_at


class InMemoryLock(DistributedLockInterface):
    """Process-local lock provider with expiring tokens.

    Serializes callers inside one process only; configure the Redis provider
    when several API pods handle webhooks.
    """

    def __init__(self):
        self._locks: Dict[str, LockEntry] = {}
        logger.info("Memory lock provider initialized")

    def _live_entry(self, resource_key: str) -> Optional[LockEntry]:
        entry = self._locks.get(resource_key)
        if entry is None:
            return None
        if entry.is_expired():
            del self._locks[resource_key]
            return None
        return entry

    async def acquire_lock(
        self, resource_key: str, timeout_seconds: int = 30
    ) -> Optional[str]:
        if self._live_entry(resource_key) is not None:
            logger.debug(f"Failed to acquire lock for {resource_key} - already locked")
            return None

        lock_token = str(uuid.uuid4())
        self._locks[resource_key] = LockEntry(
            token=lock_token, expires_at=time.monotonic() + timeout_seconds
        )
        logger.debug(f"Acquired lock for {resource_key} with token {lock_token}")
        return lock_token

    async def release_lock(self, resource_key: str, lock_token: str) -> bool:
        entry = self._live_entry(resource_key)
        if entry is None or entry.token != lock_token:
            logger.warning(
                f"Cannot release lock for {resource_key} - token mismatch or lock expired"
            )
            return False
        del self._locks[resource_key]
        logger.debug(f"Released lock for {resource_key}")
        return True

    async def is_locked(self, resource_key: str) -> bool:
        return self._live_entry(resource_key) is not None
