import asyncio

import pytest

from resume_analyzer.pipeline.exceptions import StageTimeoutError, TransportError
from resume_analyzer.pipeline.port_calls import call_port
from resume_analyzer.pipeline.timeouts import describe_seconds, stage_deadline
from resume_analyzer.ports.result import ServiceResult


async def _slow_result(delay: float) -> ServiceResult[str]:
    await asyncio.sleep(delay)
    return ServiceResult.ok("late")


class TestDescribeSeconds:
    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (30, "30 seconds"),
            (60, "60 seconds"),
            (120, "120 seconds"),
            (300, "5 minutes"),
            (1, "1 second"),
            (0.5, "0.5 seconds"),
        ],
    )
    def test_renders(self, seconds: float, expected: str) -> None:
        assert describe_seconds(seconds) == expected


class TestStageDeadline:
    async def test_expiry_raises_stage_timeout(self) -> None:
        with pytest.raises(StageTimeoutError, match="took too long"):
            async with stage_deadline(0.01, "took too long"):
                await asyncio.sleep(1)

    async def test_fast_block_completes(self) -> None:
        async with stage_deadline(1, "unused"):
            await asyncio.sleep(0)

    async def test_inner_timeout_error_propagates_unchanged(self) -> None:
        with pytest.raises(TimeoutError) as excinfo:
            async with stage_deadline(1, "unused"):
                raise TimeoutError("inner")
        assert not isinstance(excinfo.value, StageTimeoutError)

    async def test_timer_disarmed_after_exit(self) -> None:
        async with stage_deadline(0.05, "unused"):
            pass
        await asyncio.sleep(0.1)


class TestCallPort:
    async def test_returns_successful_result(self) -> None:
        result = await call_port(
            _slow_result(0),
            operation="Read",
            timeout_seconds=1,
            timeout_message="unused",
        )
        assert result.data == "late"

    async def test_error_result_raises_transport_error(self) -> None:
        async def failing() -> ServiceResult[str]:
            return ServiceResult.fail("bucket missing")

        with pytest.raises(TransportError, match="bucket missing"):
            await call_port(failing(), operation="Read", timeout_seconds=1, timeout_message="unused")

    async def test_raised_exception_is_wrapped(self) -> None:
        async def crashing() -> ServiceResult[str]:
            raise ConnectionError("reset by peer")

        with pytest.raises(TransportError, match="Read failed: reset by peer"):
            await call_port(crashing(), operation="Read", timeout_seconds=1, timeout_message="unused")

    async def test_slow_call_times_out(self) -> None:
        with pytest.raises(StageTimeoutError, match="Read timed out"):
            await call_port(
                _slow_result(1),
                operation="Read",
                timeout_seconds=0.01,
                timeout_message="Read timed out",
            )
