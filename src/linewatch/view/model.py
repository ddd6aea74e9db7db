"""Realtime view model.

Bridges the store's change-notification stream to the presentation
layer: holds the latest snapshot, derives the average-current series
and exposes the two operator commands.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Coroutine
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from linewatch._constants import CHART_WINDOW
from linewatch.dashboard.service import DashboardStateService
from linewatch.models.chart import ChartDataPoint
from linewatch.models.commands import CommandResult
from linewatch.models.dashboard import DashboardState, DistributionPoint
from linewatch.store.base import Unsubscribe

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DashboardViewModel:
    """Read-only dashboard state plus fire-and-forget commands.

    Usage::

        async with DashboardViewModel(service) as view:
            view.request_relay_toggle("dp-3", False)
            print(view.chart)

    Subscribes to the dashboard document on enter and unsubscribes on
    exit. Once teardown begins, no further notification is processed.
    """

    def __init__(
        self,
        service: DashboardStateService,
        *,
        initial_state: DashboardState | None = None,
        window: int = CHART_WINDOW,
        clock: Callable[[], datetime] = _utcnow,
        on_change: Callable[[DashboardViewModel], None] | None = None,
    ) -> None:
        self._service = service
        self._state = initial_state if initial_state is not None else DashboardState.fallback()
        self._loaded = initial_state is not None
        self._chart: deque[ChartDataPoint] = deque(maxlen=window)
        self._clock = clock
        self._on_change = on_change
        self._unsubscribe: Unsubscribe | None = None
        self._closed = False
        self._commands: set[asyncio.Task[CommandResult]] = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DashboardViewModel:
        self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()

    def open(self) -> None:
        if self._unsubscribe is not None or self._closed:
            return
        self._unsubscribe = self._service.store.subscribe(self._service.path, self._on_snapshot)

    def close(self) -> None:
        self._closed = True
        unsubscribe = self._unsubscribe
        self._unsubscribe = None
        if unsubscribe is not None:
            unsubscribe()

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def loaded(self) -> bool:
        """``True`` once a real snapshot (or initial state) is held."""
        return self._loaded

    @property
    def chart(self) -> list[ChartDataPoint]:
        """Trailing average-current samples, oldest first."""
        return list(self._chart)

    @property
    def average_current(self) -> float:
        if not self._chart:
            return round(self._state.average_active_current(), 2)
        return self._chart[-1].average_current

    def is_overloaded(self, point: DistributionPoint) -> bool:
        return point.is_overloaded(self._state.safety_threshold)

    @property
    def overloaded_points(self) -> list[DistributionPoint]:
        return self._state.overloaded_points()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _on_snapshot(self, document: dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            state = DashboardState.from_document(document)
        except ValidationError:
            _logger.warning("Ignoring malformed dashboard snapshot", exc_info=True)
            return

        self._state = state
        self._loaded = True
        self._chart.append(
            ChartDataPoint(time=self._clock(), average_current=state.average_active_current()),
        )

        if self._on_change is not None:
            try:
                self._on_change(self)
            except Exception:
                _logger.exception("View change listener failed")

    # ------------------------------------------------------------------
    # Commands (fire-and-forget)
    # ------------------------------------------------------------------

    def request_relay_toggle(self, relay_id: str, is_on: bool) -> None:
        """Schedule a relay toggle. Returns immediately; errors are logged."""
        self._spawn(self._service.set_relay(relay_id, is_on))

    def request_threshold_change(self, value: float) -> None:
        """Schedule a threshold write. Callers debounce edits before calling."""
        self._spawn(self._service.set_threshold(value))

    async def wait_for_commands(self) -> None:
        """Wait for commands already in flight (used on shutdown and in tests)."""
        if self._commands:
            await asyncio.gather(*list(self._commands), return_exceptions=True)

    def _spawn(self, coro: Coroutine[Any, Any, CommandResult]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._commands.add(task)
        task.add_done_callback(self._command_done)

    def _command_done(self, task: asyncio.Task[CommandResult]) -> None:
        self._commands.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Dashboard command failed", exc_info=exc)
            return
        result = task.result()
        if result.ok:
            _logger.debug("Command %s applied (target=%s)", result.command, result.target)
        else:
            _logger.info("Command %s finished with %s (target=%s)", result.command, result.status, result.target)
