"""Trailing-edge debouncing for presentation bindings.

Threshold edits arrive once per keystroke. The binding pushes every edit
into a :class:`Debouncer`; only the last value of a burst reaches the
store, once the input has been quiet for ``delay`` seconds.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Collapse successive values within ``delay`` seconds into one call.

    Must be used from within a running event loop.
    """

    def __init__(self, delay: float, action: Callable[[T], None]) -> None:
        self._delay = delay
        self._action = action
        self._handle: asyncio.TimerHandle | None = None
        self._value: T | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, value: T) -> None:
        """Replace any pending value with *value* and restart the timer."""
        if self._handle is not None:
            self._handle.cancel()
        self._value = value
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)

    def flush(self) -> None:
        """Deliver the pending value now, if any."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    def cancel(self) -> None:
        """Drop the pending value without delivering it."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._value = None

    def _fire(self) -> None:
        value = self._value
        self._handle = None
        self._value = None
        try:
            self._action(value)  # type: ignore[arg-type]
        except Exception:
            _logger.exception("Debounced action failed")
