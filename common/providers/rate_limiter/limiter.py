"""Rate limiter instance for SlowAPI."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from common.core.config import Settings, get_settings


def create_limiter(settings: Settings) -> Limiter:
    """Build a limiter whose counters live in ``rate_limit_storage_uri``.

    ``memory://`` keeps counters per process; a Redis URL shares them across
    every API pod so a sender can't bypass limits by hitting another pod.
    Limits are declared per route with ``@limiter.limit``.
    """
    return Limiter(
        key_func=get_remote_address,
        storage_uri=settings.rate_limit_storage_uri,
    )


# Route decorators need the instance at import time
limiter = create_limiter(get_settings())
