"""One-way progress channel from the card processor to its listeners.

The processor publishes a :class:`ProgressSnapshot` after every rendered
card and never waits for listeners: plain callables run inline, coroutine
functions are scheduled as tasks on the running loop. A failing listener is
logged and otherwise ignored.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Union

from .models import ProgressSnapshot

logger = logging.getLogger(__name__)

ProgressListener = Callable[
    [ProgressSnapshot], Union[None, Awaitable[None]]
]


def build_progress_snapshot(processed: int, total: int) -> ProgressSnapshot:
    """Compute the snapshot for ``processed`` out of ``total`` cards.

    Examples
    --------
    >>> build_progress_snapshot(1, 3).percentage
    33
    >>> build_progress_snapshot(0, 0).percentage
    0
    """
    if total < 0 or not 0 <= processed <= total:
        raise ValueError(f"invalid progress {processed}/{total}")
    percentage = round(processed / total * 100) if total else 0
    return ProgressSnapshot(
        total=total,
        processed=processed,
        percentage=percentage,
        current_card=f"{processed}/{total}",
    )


class ProgressBroadcaster:
    """Fan a snapshot out to every subscribed listener."""

    def __init__(self) -> None:
        self._listeners: list[ProgressListener] = []
        self._pending: set[asyncio.Task[None]] = set()

    def subscribe(self, listener: ProgressListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ProgressListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, snapshot: ProgressSnapshot) -> None:
        """Deliver ``snapshot`` without blocking on any listener."""
        for listener in list(self._listeners):
            try:
                outcome = listener(snapshot)
            except Exception:
                logger.exception("Progress listener %r failed", listener)
                continue
            if inspect.isawaitable(outcome):
                self._schedule(outcome)

    def _schedule(self, awaitable: Awaitable[None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; dropping async progress update")
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return
        task = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Async progress listener failed: %s", exc)


__all__ = ["ProgressBroadcaster", "ProgressListener", "build_progress_snapshot"]
