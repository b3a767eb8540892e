from common.core.config import Settings
from common.core.constants import Environment, LockProviderType
from common.core.otel_axiom_exporter import get_logger

from .interface import DistributedLockInterface
from .memory_lock import InMemoryLock
from .redis_lock import RedisLock

logger = get_logger(__name__)


def create_lock_provider(settings: Settings) -> DistributedLockInterface:
    """
    Build the lock provider selected by ``settings.lock_provider``.

    Settings default to Redis outside LOCAL, so every API process
    serializes an account through the same lock.

    Returns:
        DistributedLockInterface: The lock provider instance
    """
    if settings.lock_provider == LockProviderType.REDIS:
        logger.info("Initialized Redis lock provider")
        return RedisLock(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password,
            db=settings.redis_db,
        )

    if settings.environment != Environment.LOCAL:
        logger.warning(
            "In-memory lock provider outside local development: reconciliations "
            "are only serialized within this process",
            extra={"environment": settings.environment.value},
        )
    logger.info("Initialized in-memory lock provider")
    return InMemoryLock()
