import asyncio
from typing import Any, Awaitable, Dict, Optional, TypeVar

from common.core.otel_axiom_exporter import get_logger
from packages.billing.exceptions import GatewayError

logger = get_logger(__name__)

T = TypeVar("T")


async def bounded_gateway_call(
    call: Awaitable[T],
    timeout: float,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
) -> T:
    """
    Await a billing gateway call, giving up after ``timeout`` seconds.

    Raises:
        GatewayError: The call did not finish in time
    """
    try:
        return await asyncio.wait_for(call, timeout)
    except asyncio.TimeoutError as e:
        logger.error(
            f"Billing gateway {operation} timed out after {timeout}s",
            extra={"operation": operation, **(context or {})},
        )
        raise GatewayError(
            f"Billing gateway {operation} timed out after {timeout}s", context
        ) from e
