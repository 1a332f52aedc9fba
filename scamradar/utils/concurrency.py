# scamradar/utils/concurrency.py
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class Outcome(Generic[T]):
    """Result of one settled call: either ``value`` or ``error`` is meaningful."""
    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[BaseException] = None):
        self.value = value
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        return f"Outcome(value={self.value!r}, error={self.error!r})"


async def settle_all(*calls: Awaitable[Any]) -> List[Outcome[Any]]:
    """
    Start every call, wait for all of them to finish, and return one Outcome
    per call in argument order. A failing call never cancels its siblings.
    """
    if not calls:
        return []
    tasks = [asyncio.ensure_future(c) for c in calls]
    await asyncio.wait(tasks)

    outcomes: List[Outcome[Any]] = []
    for t in tasks:
        if t.cancelled():
            outcomes.append(Outcome(error=asyncio.CancelledError()))
        elif t.exception() is not None:
            outcomes.append(Outcome(error=t.exception()))
        else:
            outcomes.append(Outcome(value=t.result()))
    return outcomes
