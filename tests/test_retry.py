"""Tests for the fixed-attempt retry wrapper."""

from __future__ import annotations

import pytest

from instascraper.exceptions import NotFoundError, TransportError
from instascraper.transport import HttpOutcome
from instascraper.utils.retry import execute


class FlakyCall:
    """Fails with TransportError `failures` times, then returns an outcome."""

    def __init__(self, failures: int, outcome: HttpOutcome | None = None):
        self.failures = failures
        self.outcome = outcome or HttpOutcome(200, "{}")
        self.calls = 0

    async def __call__(self) -> HttpOutcome:
        self.calls += 1
        if self.calls <= self.failures:
            raise TransportError(f"attempt {self.calls} timed out")
        return self.outcome


@pytest.mark.asyncio
class TestExecute:
    async def test_first_success_is_returned(self) -> None:
        call = FlakyCall(failures=0)
        assert await execute(call) is call.outcome
        assert call.calls == 1

    async def test_recovers_within_four_attempts(self) -> None:
        call = FlakyCall(failures=3)
        assert await execute(call) is call.outcome
        assert call.calls == 4

    async def test_reraises_last_transport_error(self) -> None:
        call = FlakyCall(failures=10)
        with pytest.raises(TransportError, match="attempt 4"):
            await execute(call)
        assert call.calls == 4

    async def test_custom_attempt_count(self) -> None:
        call = FlakyCall(failures=10)
        with pytest.raises(TransportError):
            await execute(call, max_attempts=2)
        assert call.calls == 2

    async def test_error_status_is_not_retried(self) -> None:
        call = FlakyCall(failures=0, outcome=HttpOutcome(503, "unavailable"))
        outcome = await execute(call)
        assert outcome.status_code == 503
        assert call.calls == 1

    async def test_other_errors_propagate_immediately(self) -> None:
        calls = []

        async def lookup() -> HttpOutcome:
            calls.append(1)
            raise NotFoundError("gone")

        with pytest.raises(NotFoundError):
            await execute(lookup)
        assert len(calls) == 1

    async def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError):
            await execute(FlakyCall(failures=0), max_attempts=0)
