from collections.abc import Awaitable
from typing import TypeVar

from resume_analyzer.pipeline.exceptions import TransportError
from resume_analyzer.pipeline.timeouts import stage_deadline
from resume_analyzer.ports.result import ServiceResult

T = TypeVar("T")


async def call_port(
    pending: Awaitable[ServiceResult[T]],
    *,
    operation: str,
    timeout_seconds: float,
    timeout_message: str,
) -> ServiceResult[T]:
    """Await a port call under a deadline and require a successful result.

    Raises:
        StageTimeoutError: if the call does not finish in time.
        TransportError: if the call raises or returns an error result.
    """
    async with stage_deadline(timeout_seconds, timeout_message):
        try:
            result = await pending
        except Exception as exc:
            raise TransportError(f"{operation} failed: {exc}") from exc
    if result.error is not None:
        raise TransportError(result.error)
    return result
