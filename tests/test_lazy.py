"""Tests for the deferred value cell."""

import asyncio

import pytest
from trackbridge.models.lazy import Deferred


class CountingResolver:
    """Resolver that counts its calls."""

    def __init__(self, value: str = "value", error: Exception | None = None) -> None:
        self.value = value
        self.error = error
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return f"{self.value}-{self.calls}"


class TestDeferred:
    """Tests for Deferred."""

    def test_not_resolved_on_creation(self) -> None:
        """The resolver must not run until forced."""
        resolver = CountingResolver()
        cell = Deferred(resolver)

        assert not cell.is_resolved
        assert cell.peek() is None
        assert resolver.calls == 0

    @pytest.mark.asyncio
    async def test_force_is_memoized(self) -> None:
        resolver = CountingResolver()
        cell = Deferred(resolver)

        first = await cell.force()
        second = await cell.force()

        assert first == second == "value-1"
        assert resolver.calls == 1
        assert cell.is_resolved
        assert cell.peek() == "value-1"

    @pytest.mark.asyncio
    async def test_concurrent_force_resolves_once(self) -> None:
        """Concurrent callers should share one resolution."""
        resolver = CountingResolver()
        cell = Deferred(resolver)

        results = await asyncio.gather(*(cell.force() for _ in range(5)))

        assert set(results) == {"value-1"}
        assert resolver.calls == 1

    @pytest.mark.asyncio
    async def test_reset_resolves_again(self) -> None:
        resolver = CountingResolver()
        cell = Deferred(resolver)

        await cell.force()
        cell.reset()

        assert not cell.is_resolved
        assert await cell.force() == "value-2"

    @pytest.mark.asyncio
    async def test_error_leaves_cell_unresolved(self) -> None:
        """A failing resolver propagates and can be retried."""
        resolver = CountingResolver(error=RuntimeError("boom"))
        cell = Deferred(resolver)

        with pytest.raises(RuntimeError, match="boom"):
            await cell.force()

        assert not cell.is_resolved
        resolver.error = None
        assert await cell.force() == "value-2"

    @pytest.mark.asyncio
    async def test_refresh_waits_for_inflight_resolution(self) -> None:
        """A refresh queued behind a running resolution still resolves again."""
        gate = asyncio.Event()
        calls = 0

        async def resolver() -> str:
            nonlocal calls
            calls += 1
            if calls == 1:
                await gate.wait()
            return f"value-{calls}"

        cell = Deferred(resolver)
        first = asyncio.create_task(cell.force())
        await asyncio.sleep(0)
        refreshed = asyncio.create_task(cell.force(refresh=True))
        await asyncio.sleep(0)
        gate.set()

        assert await first == "value-1"
        assert await refreshed == "value-2"
        assert calls == 2
        assert cell.peek() == "value-2"
