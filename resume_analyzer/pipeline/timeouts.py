import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from resume_analyzer.pipeline.exceptions import StageTimeoutError


@asynccontextmanager
async def stage_deadline(seconds: float, message: str) -> AsyncIterator[None]:
    """Bound the enclosed block; expiry raises StageTimeoutError(message).

    The timer is disarmed when the block exits either way. A TimeoutError
    raised by the block itself (not by this deadline) propagates unchanged.
    """
    scope = asyncio.timeout(seconds)
    try:
        async with scope:
            yield
    except TimeoutError as exc:
        if scope.expired():
            raise StageTimeoutError(message) from exc
        raise


def describe_seconds(seconds: float) -> str:
    """Render a deadline for user-facing text: ``120 seconds``, ``5 minutes``."""
    if seconds > 120 and seconds % 60 == 0:
        minutes = int(seconds // 60)
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    value = int(seconds) if float(seconds).is_integer() else seconds
    return f"{value} second" if value == 1 else f"{value} seconds"
