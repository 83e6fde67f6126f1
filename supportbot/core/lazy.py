"""
Lazy Initialization

Process-wide, initialize-once values (KB snapshot, embedding model).

Design decisions:
- First caller runs the factory; concurrent callers await the same attempt
- A failed attempt is not cached, the next caller tries again
- Reset is explicit and only meant for tests and reload tooling
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class AsyncLazy(Generic[T]):
    """
    Single-flight lazy cell.

    Usage:
        snapshot = AsyncLazy(load_snapshot)
        kb = await snapshot.get()
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory
        self._lock = asyncio.Lock()
        self._value: T | None = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def get(self) -> T:
        """Return the value, running the factory at most once."""
        if self._initialized:
            return self._value  # type: ignore[return-value]

        async with self._lock:
            if not self._initialized:
                self._value = await self._factory()
                self._initialized = True

        return self._value  # type: ignore[return-value]

    def reset(self) -> None:
        """Drop the cached value."""
        self._value = None
        self._initialized = False
