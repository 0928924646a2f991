"""Lazily computed values."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class Deferred(Generic[T]):
    """Cell holding either an unresolved resolver or its resolved value.

    The resolver runs only when ``force()`` is awaited. Concurrent callers
    share one resolution; later calls return the stored value without
    running the resolver again. If the resolver raises, the cell stays
    unresolved and the error propagates to the caller.
    """

    def __init__(self, resolver: Callable[[], Awaitable[T]]) -> None:
        self._resolver = resolver
        self._value: T | None = None
        self._resolved = False
        self._lock = asyncio.Lock()

    @property
    def is_resolved(self) -> bool:
        """Whether the value has been computed."""
        return self._resolved

    def peek(self) -> T | None:
        """Return the resolved value without resolving, or None."""
        return self._value if self._resolved else None

    async def force(self, refresh: bool = False) -> T:
        """Resolve the value if needed and return it.

        Args:
            refresh: Resolve again even if a value is stored. Runs after any
                resolution already in flight, never returning its value.
        """
        async with self._lock:
            if refresh or not self._resolved:
                self._value = await self._resolver()
                self._resolved = True
        return self._value  # type: ignore[return-value]

    def reset(self) -> None:
        """Drop the resolved value so the next ``force()`` resolves again."""
        self._value = None
        self._resolved = False
