"""Trailing-edge debouncing on top of the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

__all__ = ["Debouncer"]

logger = logging.getLogger(__name__)


class Debouncer:
    """Run only the last callback scheduled within a quiet period.

    Each :meth:`schedule` cancels the pending timer and bumps a monotonic
    generation counter. A callback receives the generation it was scheduled
    with; work finishing for a generation other than :attr:`generation` is
    stale and must be discarded (see :meth:`is_current`).
    """

    def __init__(
        self, delay: float, *, loop: asyncio.AbstractEventLoop | None = None
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = float(delay)
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def schedule(self, callback: Callable[[int], None]) -> int:
        """Schedule ``callback`` after :attr:`delay` seconds of inactivity.

        Requires a running event loop unless one was passed to the
        constructor.
        """

        self.cancel()
        self._generation += 1
        generation = self._generation
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, generation, callback)
        return generation

    def invalidate(self) -> int:
        """Cancel pending work and mark every issued generation as stale."""

        self.cancel()
        self._generation += 1
        return self._generation

    def cancel(self) -> None:
        handle = self._handle
        if handle is not None:
            handle.cancel()
            self._handle = None

    def _fire(self, generation: int, callback: Callable[[int], None]) -> None:
        if not self.is_current(generation):
            logger.debug(
                "Discarding stale debounced call.",
                extra={"event": "debounce.stale", "generation": generation},
            )
            return
        self._handle = None
        callback(generation)
