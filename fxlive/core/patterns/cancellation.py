"""Cooperative cancellation for single-flight fetches."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from fxlive.core.exceptions.base import AbortedOperation

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal shared between a caller and a fetch."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self, operation: str = "fetch") -> None:
        if self.cancelled:
            raise AbortedOperation(operation)


async def run_cancellable(
    factory: Callable[[], Awaitable[T]],
    token: CancellationToken | None,
    operation: str = "fetch",
) -> T:
    """Await ``factory()`` unless ``token`` fires first.

    When the token wins, the underlying task is cancelled, its outcome is
    discarded and ``AbortedOperation`` is raised instead.
    """
    if token is None:
        return await factory()

    token.raise_if_cancelled(operation)
    task = asyncio.ensure_future(factory())
    waiter = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        waiter.cancel()
        raise

    if token.cancelled:
        _discard(task)
        raise AbortedOperation(operation)

    waiter.cancel()
    return task.result()


def _discard(task: asyncio.Future) -> None:
    if task.done():
        if not task.cancelled():
            # mark the outcome as retrieved
            task.exception()
        return
    task.cancel()


__all__ = ["CancellationToken", "run_cancellable"]
